from fastapi import APIRouter
from appraisal_hub.routers import (
    employees, teams, periods, templates, assignments, links,
    appraisals, dashboard, summaries, settings, profiles,
)

# Routers are aggregated here; main.py only imports this hub
api_router = APIRouter()

api_router.include_router(employees.router)
api_router.include_router(teams.router)
api_router.include_router(periods.router)
api_router.include_router(templates.router)
api_router.include_router(assignments.router)
api_router.include_router(links.router)
api_router.include_router(appraisals.router)
api_router.include_router(dashboard.router)
api_router.include_router(summaries.router)
api_router.include_router(settings.router)
api_router.include_router(profiles.router)
