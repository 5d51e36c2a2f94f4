import logging

from fastapi import FastAPI

from pricesync.api.routes import router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="pricesync")
app.include_router(router)
