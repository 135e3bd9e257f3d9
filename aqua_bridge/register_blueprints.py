"""
Centralized Blueprint Registration
All blueprints MUST be registered inside register_all_blueprints(app)
"""


def register_all_blueprints(app):

    # Root / health
    from aqua_bridge.routes.root_routes import root_bp
    app.register_blueprint(root_bp)

    # OTP login
    from aqua_bridge.routes.otp_routes import otp_bp
    app.register_blueprint(otp_bp)

    # Market status + prices (admin)
    from aqua_bridge.routes.market_routes import market_bp
    app.register_blueprint(market_bp)

    # Harvest requests (farmer submit, admin approve/reject)
    from aqua_bridge.routes.harvest_routes import harvest_bp
    app.register_blueprint(harvest_bp)

    app.logger.info("All blueprints registered")
