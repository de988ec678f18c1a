from pydantic import BaseModel, field_validator

class LoginIn(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def username_required(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("username is required")
        return v

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
