from pydantic import BaseModel, ConfigDict


class Organiser(BaseModel):
    organiser_id: int
    name: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class OrganiserSession(BaseModel):
    """What a session token resolves to"""

    organiser_id: int
    organiser_name: str
    is_authenticated: bool = True
