from fastapi import Header, HTTPException
from jose import jwt
from jose.exceptions import JOSEError

from paypal_ec.config import JWT_SECRET


def verify_token(authorization: str = Header(...)):
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Invalid or missing token")
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=["HS256"])
    except JOSEError:
        raise HTTPException(status_code=401, detail="Invalid or missing token")
