from fastapi import APIRouter, Depends, File, UploadFile
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.people.schemas import PersonCreate, PersonUpdate, PersonResponse, PersonType
from churchecker.modules.people.service import PeopleService
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/churches/{church_id}/people", tags=["people"])


def get_people_service(supabase: Client = Depends(get_supabase)) -> PeopleService:
    return PeopleService(supabase)


@router.get("", response_model=List[PersonResponse])
async def list_people(
    type: Optional[PersonType] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: PeopleService = Depends(get_people_service)
):
    """List the church roster, optionally only students or teachers"""
    return service.list_people(access.church_id, type)


@router.post("", response_model=PersonResponse, status_code=201)
async def create_person(
    person_data: PersonCreate,
    access: ChurchAccess = Depends(require_church_capability("people:write")),
    service: PeopleService = Depends(get_people_service)
):
    """Register a person on the roster (admin or teacher)"""
    return service.create_person(access.church_id, person_data, access.user_id)


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    person_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: PeopleService = Depends(get_people_service)
):
    return service.get_record(access.church_id, person_id)


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(
    person_id: str,
    person_data: PersonUpdate,
    access: ChurchAccess = Depends(require_church_capability("people:write")),
    service: PeopleService = Depends(get_people_service)
):
    return service.update_person(access.church_id, person_id, person_data)


@router.delete("/{person_id}", status_code=204)
async def delete_person(
    person_id: str,
    access: ChurchAccess = Depends(require_church_capability("people:write")),
    service: PeopleService = Depends(get_people_service)
):
    """Delete a person together with their attendance history"""
    service.delete_person(access.church_id, person_id)
    return None


@router.post("/{person_id}/photo", response_model=PersonResponse)
async def upload_photo(
    person_id: str,
    file: UploadFile = File(...),
    access: ChurchAccess = Depends(require_church_capability("people:write")),
    service: PeopleService = Depends(get_people_service)
):
    """Upload or replace a person's photo"""
    content = await file.read()
    return service.upload_photo(access.church_id, person_id, content, file.content_type or "")


@router.delete("/{person_id}/photo", response_model=PersonResponse)
async def delete_photo(
    person_id: str,
    access: ChurchAccess = Depends(require_church_capability("people:write")),
    service: PeopleService = Depends(get_people_service)
):
    return service.delete_photo(access.church_id, person_id)
