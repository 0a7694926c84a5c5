from pydantic import BaseModel, Field

from app.features.users.schemas import UserOut

# ---------- Inputs ----------

class LoginIn(BaseModel):
    username: str = Field(..., min_length=1, description="user_name ou email")
    password: str = Field(..., min_length=1)


# ---------- Outputs ----------

class LoginOut(BaseModel):
    message: str
    token: str
    user: UserOut
