from fastapi import FastAPI

from paypal_ec.config import LOG_LEVEL
from paypal_ec.database import init_db
from paypal_ec.gateway import PaypalExpressCheckout
from paypal_ec.logging import configure_logging
from paypal_ec.routes import router

configure_logging(LOG_LEVEL)

app = FastAPI(title=PaypalExpressCheckout.label)

app.include_router(router)

init_db()
