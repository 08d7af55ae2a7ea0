"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (recommendations, rates,
preferences). Routes parse the request, call a service and map the
result to a response model.
"""
