from typing import List, Optional

from pydantic import EmailStr, Field

from shared.api import ApiResponse, CamelModel


class AddressCreate(CamelModel):
    name: str = Field(min_length=1)
    mobile: str = Field(pattern=r"^\+?[0-9]{7,15}$")
    email: EmailStr
    pincode: str = Field(min_length=3, max_length=12)
    landmark: Optional[str] = None
    district: str
    state: str


class AddressResponse(AddressCreate):
    id: str
    user_id: str
    email: str


class AddressEnvelope(ApiResponse):
    record: AddressResponse


class AddressListEnvelope(ApiResponse):
    total: int
    records: List[AddressResponse]
