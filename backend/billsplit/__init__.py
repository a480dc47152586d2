from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from billsplit.config import Config
from billsplit.extensions import init_mongo

jwt = JWTManager()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    CORS(
        app,
        supports_credentials=True,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}
    )
    # Init extensions
    init_mongo(app)
    jwt.init_app(app)

    # Register blueprints
    from billsplit.settlements.routes import bp as settlements_bp

    app.register_blueprint(settlements_bp, url_prefix='/api/v1/settlements')

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        return jsonify({"status": "healthy"})

    return app
