"""
AWS Lambda handler for SUPER Bot API

Routes all API Gateway requests through the FastAPI application.
"""

from mangum import Mangum
from superbot.main import app

# Create Mangum adapter for FastAPI
handler = Mangum(app, lifespan="off")
