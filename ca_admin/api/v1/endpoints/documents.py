"""Document API: year documents and client-level generic documents."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from ca_admin.api.v1.dependencies import TenantDep, get_document_repo
from ca_admin.application.dtos.client import DocumentInput
from ca_admin.infrastructure.firebase.repositories import DocumentRepository
from ca_admin.schemas.document import DocumentCreateRequest, DocumentResponse

router = APIRouter()

DocumentRepoDep = Annotated[DocumentRepository, Depends(get_document_repo)]


def _to_input(body: DocumentCreateRequest) -> DocumentInput:
    return DocumentInput(
        name=body.name,
        file_name=body.file_name,
        doc_name=body.doc_name,
        file_url=body.file_url,
        file_path=body.file_path,
        file_data=body.file_data,
        file_size=body.file_size,
        file_type=body.file_type,
        uploaded_by=body.uploaded_by,
    )


@router.get("/{contact}/years/{year}/documents", response_model=list[DocumentResponse])
async def list_documents(contact: str, year: str, tenant: TenantDep, repo: DocumentRepoDep):
    docs = await repo.list_documents(tenant, contact, year)
    return [DocumentResponse.model_validate(d) for d in docs]


@router.post(
    "/{contact}/years/{year}/documents", response_model=DocumentResponse, status_code=201
)
async def add_document(
    contact: str,
    year: str,
    body: DocumentCreateRequest,
    tenant: TenantDep,
    repo: DocumentRepoDep,
):
    """Record an uploaded document under an existing year."""
    doc = await repo.add_document(tenant, contact, year, _to_input(body))
    return DocumentResponse.model_validate(doc)


@router.delete("/{contact}/years/{year}/documents/{document_id}", status_code=204)
async def delete_document(
    contact: str, year: str, document_id: str, tenant: TenantDep, repo: DocumentRepoDep
) -> Response:
    await repo.delete_document(tenant, contact, year, document_id)
    return Response(status_code=204)


@router.get("/{contact}/generic-documents", response_model=list[DocumentResponse])
async def list_generic_documents(contact: str, tenant: TenantDep, repo: DocumentRepoDep):
    docs = await repo.list_generic_documents(tenant, contact)
    return [DocumentResponse.model_validate(d) for d in docs]


@router.post("/{contact}/generic-documents", response_model=DocumentResponse, status_code=201)
async def add_generic_document(
    contact: str, body: DocumentCreateRequest, tenant: TenantDep, repo: DocumentRepoDep
):
    doc = await repo.add_generic_document(tenant, contact, _to_input(body))
    return DocumentResponse.model_validate(doc)


@router.delete("/{contact}/generic-documents/{document_id}", status_code=204)
async def delete_generic_document(
    contact: str, document_id: str, tenant: TenantDep, repo: DocumentRepoDep
) -> Response:
    await repo.delete_generic_document(tenant, contact, document_id)
    return Response(status_code=204)
