from request_tracker import create_app
from waitress import serve
import os

# Get environment configuration
ENV = os.getenv('FLASK_ENV', 'development')
URL_PREFIX = os.getenv('URL_PREFIX', '/requests-app' if ENV == 'production' else '')
PORT = int(os.getenv('PORT', '8090'))

# Create the application using our factory function
app = create_app(ENV, url_prefix=URL_PREFIX)

if URL_PREFIX:
    app.config.update(
        SESSION_COOKIE_PATH=URL_PREFIX
    )

if __name__ == '__main__':
    if ENV == 'production':
        app.logger.info("Starting Waitress server with URL_PREFIX=%s on port %s", URL_PREFIX, PORT)
        serve(app, host='0.0.0.0', port=PORT)
    else:
        app.logger.info("Starting Flask development server with URL_PREFIX=%s", URL_PREFIX)
        for rule in sorted(app.url_map.iter_rules(), key=lambda r: str(r)):
            methods = ",".join(sorted(rule.methods - {"HEAD", "OPTIONS"}))
            app.logger.info("%s -> endpoint=%s methods=[%s]", rule, rule.endpoint, methods)
        app.run(debug=True)
