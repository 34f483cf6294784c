"""Resource operations for files, folders, workspaces and trash."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import httpx

from .body import UNSET, RequestBodyBuilder
from .client import DriveClient
from .endpoints import FileEndpoints, FolderEndpoints, TrashEndpoints, WorkspaceEndpoints
from .errors import classify_transport_error, wrap
from .query import QueryBuilder
from .upload import FileUploader

logger = logging.getLogger(__name__)


class FilesAPI:
    """Operations on personal files."""

    def __init__(self, client: DriveClient, uploader: FileUploader):
        self._client = client
        self._uploader = uploader

    async def list_files(
        self,
        folder_id: Optional[str] = None,
        include_subfolders: Optional[bool] = None,
        starred: Optional[bool] = None,
        shared: Optional[bool] = None,
        trashed: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Any:
        query = (
            QueryBuilder()
            .append_file_filters(
                folder_id=folder_id,
                include_subfolders=include_subfolders,
                starred=starred,
                shared=shared,
                trashed=trashed,
                search=search,
            )
            .append_pagination(limit, offset)
            .append_sort(sort_by, sort_order)
        )
        return await self._client.get(FileEndpoints.LIST, query=query.params())

    async def get_file(self, file_id: str) -> Any:
        return await self._client.get(FileEndpoints.get(file_id))

    async def upload_file(self, file_path: Union[str, Path], folder_path: Optional[str] = None) -> Any:
        result = await self._uploader.upload_personal_file(file_path, folder_path)
        return result.unwrap(FileEndpoints.UPLOAD)

    async def download_file(self, file_id: str) -> Any:
        return await self._client.get(FileEndpoints.download(file_id))

    async def download_to(
        self,
        file_id: str,
        destination: Union[str, Path],
        chunk_size: int = 64 * 1024,
    ) -> Dict[str, Any]:
        """Stream a file's content to a local path without buffering it whole."""
        destination = Path(destination)
        endpoint = FileEndpoints.fetch(file_id)
        response = await self._client.get(endpoint, raw_response=True)
        written = 0
        try:
            with destination.open("wb") as out:
                async for chunk in response.aiter_bytes(chunk_size):
                    out.write(chunk)
                    written += len(chunk)
        except httpx.TransportError as e:
            raise classify_transport_error(e, endpoint, "GET") from e
        except OSError as e:
            raise wrap(e, f"Failed to write download to {destination}") from e
        finally:
            await response.aclose()

        logger.info("Download completed", extra={"file_id": file_id, "bytes": written})
        return {"path": str(destination), "bytes": written}

    async def generate_signed_url(self, file_id: str, expires: Optional[int] = None) -> Any:
        query = QueryBuilder().append_number("expires", expires)
        return await self._client.get(FileEndpoints.signed_url(file_id), query=query.params())

    async def fetch_file_content(self, file_id: str, download: Optional[bool] = None) -> Any:
        """Fetch file content; non-JSON content comes back as text."""
        query = QueryBuilder().append_boolean("download", download)
        return await self._client.get(FileEndpoints.fetch(file_id), query=query.params())

    async def move_file(self, file_id: str, folder_id: Optional[str] = UNSET) -> Any:
        body = RequestBodyBuilder.for_move(folder_id).build()
        return await self._client.put(FileEndpoints.move(file_id), body)

    async def share_file(
        self,
        file_id: str,
        emails: Iterable[str],
        role: Any = UNSET,
        can_share: Any = UNSET,
        message: Any = UNSET,
    ) -> Any:
        body = RequestBodyBuilder.for_share(emails, role=role, can_share=can_share, message=message).build()
        return await self._client.post(FileEndpoints.share(file_id), body)


class FoldersAPI:
    """Operations on personal folders."""

    def __init__(self, client: DriveClient):
        self._client = client

    async def list_folders(
        self,
        folder_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        starred: Optional[bool] = None,
        shared: Optional[bool] = None,
        trashed: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Any:
        query = (
            QueryBuilder()
            .append_folder_filters(
                folder_id=folder_id,
                parent_id=parent_id,
                starred=starred,
                shared=shared,
                trashed=trashed,
                search=search,
            )
            .append_pagination(limit, offset)
            .append_sort(sort_by, sort_order)
        )
        return await self._client.get(FolderEndpoints.LIST, query=query.params())

    async def create_folder(self, name: str, parent_id: Any = UNSET, description: Any = UNSET) -> Any:
        body = (
            RequestBodyBuilder()
            .set_required("name", name)
            .set_optional_nullable("parentId", parent_id)
            .set_optional("description", description)
            .build()
        )
        return await self._client.post(FolderEndpoints.CREATE, body)

    async def get_folder(self, folder_id: str) -> Any:
        return await self._client.get(FolderEndpoints.get(folder_id))

    async def update_folder(
        self,
        folder_id: str,
        name: Any = UNSET,
        description: Any = UNSET,
        color: Any = UNSET,
        is_starred: Any = UNSET,
        action: Any = UNSET,
    ) -> Any:
        body = RequestBodyBuilder.for_folder(
            name=name,
            description=description,
            color=color,
            is_starred=is_starred,
            action=action,
        ).build()
        return await self._client.patch(FolderEndpoints.get(folder_id), body)

    async def delete_folder(self, folder_id: str, permanent: Optional[bool] = None) -> Any:
        query = QueryBuilder().append_boolean("permanent", permanent)
        return await self._client.delete(FolderEndpoints.get(folder_id), query=query.params())

    async def move_folder(self, folder_id: str, parent_id: Optional[str] = UNSET) -> Any:
        body = RequestBodyBuilder.for_move(parent_id, key="parentId").build()
        return await self._client.put(FolderEndpoints.move(folder_id), body)

    async def share_folder(
        self,
        folder_id: str,
        emails: Iterable[str],
        role: Any = UNSET,
        can_share: Any = UNSET,
        message: Any = UNSET,
    ) -> Any:
        body = RequestBodyBuilder.for_share(emails, role=role, can_share=can_share, message=message).build()
        return await self._client.post(FolderEndpoints.share(folder_id), body)


class WorkspacesAPI:
    """Operations on shared workspaces and their contents."""

    def __init__(self, client: DriveClient, uploader: FileUploader):
        self._client = client
        self._uploader = uploader

    async def list_workspaces(self) -> Any:
        return await self._client.get(WorkspaceEndpoints.LIST)

    async def create_workspace(
        self,
        name: str,
        storage_allocation: int,
        description: Any = UNSET,
        icon: Any = UNSET,
        color: Any = UNSET,
    ) -> Any:
        body = RequestBodyBuilder.for_workspace_create(
            name,
            storage_allocation,
            description=description,
            icon=icon,
            color=color,
        ).build()
        return await self._client.post(WorkspaceEndpoints.CREATE, body)

    async def get_workspace(self, workspace_id: str) -> Any:
        return await self._client.get(WorkspaceEndpoints.get(workspace_id))

    async def upload_workspace_file(
        self,
        workspace_id: str,
        file_path: Union[str, Path],
        folder_id: Optional[str] = None,
    ) -> Any:
        result = await self._uploader.upload_workspace_file(workspace_id, file_path, folder_id)
        return result.unwrap(WorkspaceEndpoints.upload_file(workspace_id))

    async def list_workspace_files(
        self,
        workspace_id: str,
        folder_id: Optional[str] = None,
        starred: Optional[bool] = None,
        trashed: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Any:
        query = (
            QueryBuilder()
            .append_workspace_filters(folder_id=folder_id, starred=starred, trashed=trashed, search=search)
            .append_pagination(limit, offset)
            .append_sort(sort_by, sort_order)
        )
        return await self._client.get(WorkspaceEndpoints.files(workspace_id), query=query.params())

    async def list_workspace_folders(
        self,
        workspace_id: str,
        parent_id: Optional[str] = None,
        starred: Optional[bool] = None,
        trashed: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Any:
        query = (
            QueryBuilder()
            .append_workspace_filters(parent_id=parent_id, starred=starred, trashed=trashed, search=search)
            .append_pagination(limit, offset)
            .append_sort(sort_by, sort_order)
        )
        return await self._client.get(WorkspaceEndpoints.folders(workspace_id), query=query.params())

    async def create_workspace_folder(
        self,
        workspace_id: str,
        name: str,
        parent_id: Any = UNSET,
        description: Any = UNSET,
        color: Any = UNSET,
    ) -> Any:
        body = (
            RequestBodyBuilder()
            .set_required("name", name)
            .set_optional_nullable("parentId", parent_id)
            .set_optional("description", description)
            .set_optional("color", color)
            .build()
        )
        return await self._client.post(WorkspaceEndpoints.folders(workspace_id), body)

    async def get_workspace_folder(self, workspace_id: str, folder_id: str) -> Any:
        return await self._client.get(WorkspaceEndpoints.folder(workspace_id, folder_id))

    async def update_workspace_folder(
        self,
        workspace_id: str,
        folder_id: str,
        name: Any = UNSET,
        description: Any = UNSET,
        color: Any = UNSET,
        parent_id: Any = UNSET,
        is_starred: Any = UNSET,
        is_trashed: Any = UNSET,
    ) -> Any:
        body = RequestBodyBuilder.for_folder(
            name=name,
            description=description,
            color=color,
            parent_id=parent_id,
            is_starred=is_starred,
            is_trashed=is_trashed,
        ).build()
        return await self._client.patch(WorkspaceEndpoints.folder(workspace_id, folder_id), body)

    async def delete_workspace_folder(
        self,
        workspace_id: str,
        folder_id: str,
        permanent: Optional[bool] = None,
    ) -> Any:
        query = QueryBuilder().append_boolean("permanent", permanent)
        return await self._client.delete(
            WorkspaceEndpoints.folder(workspace_id, folder_id),
            query=query.params(),
        )


class TrashAPI:
    """Operations on trashed items."""

    def __init__(self, client: DriveClient):
        self._client = client

    async def list_trash(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Any:
        query = QueryBuilder().append_pagination(limit, offset).append_sort(sort_by, sort_order)
        return await self._client.get(TrashEndpoints.LIST, query=query.params())

    async def restore_from_trash(self, item_id: str, type: Optional[str] = None) -> Any:
        query = QueryBuilder().append_if_defined("type", type)
        return await self._client.post(TrashEndpoints.restore(item_id), {}, query=query.params())

    async def empty_trash(self) -> Any:
        return await self._client.delete(TrashEndpoints.EMPTY)


class DriveAPI:
    """Entry point grouping every resource operation over one client."""

    def __init__(self, client: DriveClient, uploader: Optional[FileUploader] = None):
        self.client = client
        self.uploader = uploader or FileUploader(client.config)
        self.files = FilesAPI(client, self.uploader)
        self.folders = FoldersAPI(client)
        self.workspaces = WorkspacesAPI(client, self.uploader)
        self.trash = TrashAPI(client)

    async def aclose(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
