from dotenv import load_dotenv


from fastapi import FastAPI

from app.api.api_v1 import router as api_v1
from app.core.config import settings
from app.core.lifespan import lifespan

load_dotenv()  # Load .env variables into os.environ


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)


@app.get("/")
def root():
    return {"message": f"Hello from {settings.PROJECT_NAME}!"}


app.include_router(api_v1)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
