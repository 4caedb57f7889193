"""API router aggregation"""
from fastapi import APIRouter
from smsdesk.api.v1.endpoints import auth_endpoints, message_endpoints, protection_endpoints
from smsdesk.api.v1.endpoints import contact_endpoints
from smsdesk.api.v1.endpoints import admin_endpoints

api_router = APIRouter()

api_router.include_router(auth_endpoints.router,                            tags=["Authentication"])
api_router.include_router(message_endpoints.router,                         tags=["Messages"])
api_router.include_router(protection_endpoints.router,                      tags=["Protection"])
api_router.include_router(contact_endpoints.router,   prefix="/contacts",   tags=["Contacts"])
api_router.include_router(admin_endpoints.router,     prefix="/admin",      tags=["Admin"])
