from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from altimate import NAME, __version__
from altimate.core.di.service_locator import ServiceLocator
from altimate.presentation.api.v1.alt_text_router import router as alt_text_router
from altimate.presentation.api.v1.model_router import router as model_router


app = FastAPI(title=f"{NAME} Alt Text API", version=__version__)

# Enable permissive CORS (allow all origins). Use with caution in production.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("shutdown")
def on_shutdown():
    # Release the classifier held by the shared session
    ServiceLocator.reset()


@app.get("/")
def root():
    return {"status": "ok", "message": f"{NAME} running", "version": __version__}


app.include_router(alt_text_router)
app.include_router(model_router)
