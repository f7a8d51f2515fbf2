import azure.functions as func

from bnf_recommendation_service.blueprints.recordings_bp import bp as recordings_bp

app = func.FunctionApp()

app.register_blueprint(recordings_bp)
