from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from contactbook.contacts.schemas import ContactCreate, ContactResponse, ContactUpdate, DeletedContact, ErrorResponse
from contactbook.contacts.service import create_contact, delete_contact, get_contact, get_contacts, update_contact
from contactbook.database import get_db

router = APIRouter(
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)

_not_found = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


@router.get("", response_model=list[ContactResponse])
async def list_contacts(db: Annotated[AsyncSession, Depends(get_db)]):
    return await get_contacts(db)


@router.get("/{contact_id}", response_model=ContactResponse, responses=_not_found)
async def get_contact_detail(contact_id: str, db: Annotated[AsyncSession, Depends(get_db)]):
    return await get_contact(db, contact_id)


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_new_contact(data: ContactCreate, db: Annotated[AsyncSession, Depends(get_db)]):
    return await create_contact(db, data)


@router.put("/{contact_id}", response_model=ContactResponse, responses=_not_found)
async def update_existing_contact(
    contact_id: str,
    data: ContactUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await update_contact(db, contact_id, data)


@router.delete("/{contact_id}", response_model=DeletedContact, responses=_not_found)
async def delete_existing_contact(contact_id: str, db: Annotated[AsyncSession, Depends(get_db)]):
    deleted_id = await delete_contact(db, contact_id)
    return DeletedContact(id=deleted_id)
