from sqlalchemy.orm import DeclarativeBase

# Largest value an Integer column holds on every supported backend.
INT_MAX = 2**31 - 1

class Base(DeclarativeBase):
    pass
