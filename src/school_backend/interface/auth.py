from pydantic import BaseModel, ConfigDict, Field
from school_backend.interface.users import UserGet

class LoginRequest(BaseModel):
    email: str = Field(min_length=1, description="Account email")
    password: str = Field(min_length=1)

    model_config = ConfigDict(extra='forbid')

class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    user: UserGet
