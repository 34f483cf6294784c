"""API endpoint paths."""

from urllib.parse import quote

API_VERSION = "v1"
API_BASE_PATH = f"/api/{API_VERSION}"

# Pagination defaults enforced by the service
DEFAULT_LIMIT = 50
MAX_LIMIT = 100
DEFAULT_OFFSET = 0


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class FileEndpoints:
    LIST = f"{API_BASE_PATH}/files"
    UPLOAD = f"{API_BASE_PATH}/files/upload"

    @staticmethod
    def get(file_id: str) -> str:
        return f"{API_BASE_PATH}/files/{_segment(file_id)}"

    @staticmethod
    def download(file_id: str) -> str:
        return f"{FileEndpoints.get(file_id)}/download"

    @staticmethod
    def signed_url(file_id: str) -> str:
        return f"{FileEndpoints.get(file_id)}/signed-url"

    @staticmethod
    def fetch(file_id: str) -> str:
        return f"{FileEndpoints.get(file_id)}/fetch"

    @staticmethod
    def move(file_id: str) -> str:
        return f"{FileEndpoints.get(file_id)}/move"

    @staticmethod
    def share(file_id: str) -> str:
        return f"{FileEndpoints.get(file_id)}/share"


class FolderEndpoints:
    # Listing and creation share the collection path
    LIST = f"{API_BASE_PATH}/folders"
    CREATE = LIST

    @staticmethod
    def get(folder_id: str) -> str:
        return f"{API_BASE_PATH}/folders/{_segment(folder_id)}"

    @staticmethod
    def move(folder_id: str) -> str:
        return f"{FolderEndpoints.get(folder_id)}/move"

    @staticmethod
    def share(folder_id: str) -> str:
        return f"{FolderEndpoints.get(folder_id)}/share"


class WorkspaceEndpoints:
    LIST = f"{API_BASE_PATH}/workspaces"
    CREATE = LIST

    @staticmethod
    def get(workspace_id: str) -> str:
        return f"{API_BASE_PATH}/workspaces/{_segment(workspace_id)}"

    @staticmethod
    def files(workspace_id: str) -> str:
        return f"{WorkspaceEndpoints.get(workspace_id)}/files"

    @staticmethod
    def upload_file(workspace_id: str) -> str:
        return f"{WorkspaceEndpoints.files(workspace_id)}/upload"

    @staticmethod
    def folders(workspace_id: str) -> str:
        return f"{WorkspaceEndpoints.get(workspace_id)}/folders"

    @staticmethod
    def folder(workspace_id: str, folder_id: str) -> str:
        return f"{WorkspaceEndpoints.folders(workspace_id)}/{_segment(folder_id)}"


class TrashEndpoints:
    # DELETE on the collection empties the trash
    LIST = f"{API_BASE_PATH}/trash"
    EMPTY = LIST

    @staticmethod
    def restore(item_id: str) -> str:
        return f"{API_BASE_PATH}/trash/{_segment(item_id)}/restore"
