import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roadtrip.api.routes_plan import router as plan_router

from roadtrip.core.config_loader import settings


app = FastAPI(
    title="Road Trip Planner",
    description="Multi-day driving itineraries with overnight stops, roadside attractions and food, built on OpenStreetMap data",
    version="1.0.0"
)

# -------------------------------------------------------------
# CORS
# -------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # update to frontend domain in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------------------------------------------
# ROUTES
# -------------------------------------------------------------
app.include_router(plan_router)


# -------------------------------------------------------------
# ROOT ENDPOINT
# -------------------------------------------------------------
@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Road Trip Planner backend is running",
        "env": settings.environment
    }


# -------------------------------------------------------------
# RUN LOCAL
# -------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
