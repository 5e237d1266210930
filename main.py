"""
Cloud Functions entry point when deploying from the repository root:

    gcloud functions deploy feedback --source=. --entry-point=feedback --trigger-http

Local run:

    functions-framework --target=feedback --debug
"""

from service.main import feedback  # noqa: F401
