import pytest

from aqua_bridge.errors import Expired, Mismatch, OtpNotFound, UpstreamFailure, ValidationError
from aqua_bridge.services.otp_service import OtpService, generate_code, normalize_phone
from aqua_bridge.services.otp_store import InMemoryOtpStore
from tests.conftest import FakeSmsProvider

PHONE = "+919876543210"


def make_service(clock, provider=None, codes=None, **kwargs):
    factory = iter(codes).__next__ if codes else generate_code
    return OtpService(InMemoryOtpStore(), provider, clock=clock, code_factory=factory, **kwargs)


# ---------------------------------------------------------
# normalize_phone
# ---------------------------------------------------------
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("98765 43210", "+919876543210"),
        ("919876543210", "+919876543210"),
        ("+1 555 010 9999", "+15550109999"),
        ("+919876543210", "+919876543210"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalize_phone_rejects_short_numbers():
    with pytest.raises(ValidationError):
        normalize_phone("12345")


def test_generated_codes_are_six_digits():
    for _ in range(200):
        code = generate_code()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999


# ---------------------------------------------------------
# send / verify lifecycle
# ---------------------------------------------------------
def test_verify_before_send_is_not_found(clock):
    svc = make_service(clock)
    with pytest.raises(OtpNotFound):
        svc.verify_otp(PHONE, "123456")


def test_send_without_provider_echoes_code(clock):
    svc = make_service(clock, codes=["482913"])
    out = svc.send_otp(PHONE)

    assert out["success"] is True
    assert out["code"] == "482913"
    entry = svc.store.get(PHONE)
    assert entry.code == "482913"
    assert entry.expiresAt == int(clock() * 1000) + 300_000


def test_correct_code_verifies_exactly_once(clock):
    svc = make_service(clock, codes=["111111"])
    svc.send_otp(PHONE)
    clock.advance(60)

    assert svc.verify_otp(PHONE, "111111")["success"] is True
    with pytest.raises(OtpNotFound):
        svc.verify_otp(PHONE, "111111")


@pytest.mark.parametrize("code", ["111111", "999999"])
def test_expired_code_fails_regardless_of_correctness(clock, code):
    svc = make_service(clock, codes=["111111"])
    svc.send_otp(PHONE)
    clock.advance(301)

    with pytest.raises(Expired):
        svc.verify_otp(PHONE, code)
    # expiry removes the entry
    assert svc.store.get(PHONE) is None


def test_code_still_valid_at_ttl_boundary(clock):
    svc = make_service(clock, codes=["111111"])
    svc.send_otp(PHONE)
    clock.advance(300)
    assert svc.verify_otp(PHONE, "111111")["status"] == "approved"


def test_resend_invalidates_previous_code(clock):
    svc = make_service(clock, codes=["111111", "222222"])
    svc.send_otp(PHONE)
    svc.send_otp(PHONE)

    with pytest.raises(Mismatch):
        svc.verify_otp(PHONE, "111111")
    assert svc.verify_otp(PHONE, "222222")["success"] is True


def test_mismatch_keeps_entry_until_expiry(clock):
    svc = make_service(clock, codes=["111111"])
    svc.send_otp(PHONE)

    for _ in range(5):
        with pytest.raises(Mismatch):
            svc.verify_otp(PHONE, "000000")
    assert svc.verify_otp(PHONE, "111111")["success"] is True


def test_same_number_in_different_formats_shares_entry(clock):
    svc = make_service(clock, codes=["111111"])
    svc.send_otp("98765 43210")
    assert svc.verify_otp("+91 98765 43210", "111111")["success"] is True


# ---------------------------------------------------------
# delivery through a provider
# ---------------------------------------------------------
def test_send_with_provider_dispatches_and_hides_code(clock):
    provider = FakeSmsProvider()
    svc = make_service(clock, provider=provider, codes=["654321"])
    out = svc.send_otp(PHONE)

    assert out == {"success": True, "sid": "SM0001"}
    assert provider.sent == [(PHONE, "Your AquaBridge verification code is 654321")]


def test_delivery_failure_surfaces_and_keeps_entry(clock):
    svc = make_service(clock, provider=FakeSmsProvider(fail=True), codes=["654321"])

    with pytest.raises(UpstreamFailure):
        svc.send_otp(PHONE)
    assert svc.store.get(PHONE).code == "654321"


def test_delivery_failure_rolls_back_when_configured(clock):
    svc = make_service(
        clock,
        provider=FakeSmsProvider(fail=True),
        codes=["654321"],
        rollback_on_delivery_failure=True,
    )

    with pytest.raises(UpstreamFailure):
        svc.send_otp(PHONE)
    assert svc.store.get(PHONE) is None


@pytest.mark.parametrize("code", ["１１１１１１", "11111", " 111111x"])
def test_lookalike_codes_are_mismatches(clock, code):
    svc = make_service(clock, codes=["111111"])
    svc.send_otp(PHONE)

    with pytest.raises(Mismatch):
        svc.verify_otp(PHONE, code)
    assert svc.verify_otp(PHONE, " 111111 ")["success"] is True
