import os
import logging
import tempfile
import zipfile
import requests
from ..exceptions import RetrievalError, MemberNotFoundError, FileSystemError

logger = logging.getLogger("cwe-dictgen")

DEFAULT_BASE_URL = "https://cwe.mitre.org/data/xml"
DEFAULT_TIMEOUT = 60


class CatalogAPI:
    """
    Retrieves the MITRE CWE catalog archive for a given version.

    The archive is streamed into a temporary staging file which is always
    removed before fetch_catalog returns or raises.
    """
    ARCHIVE_URL_TEMPLATE = "{base_url}/cwec_v{version}.xml.zip"
    MEMBER_NAME_TEMPLATE = "cwec_v{version}.xml"
    CHUNK_SIZE = 64 * 1024

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = DEFAULT_TIMEOUT):
        """
        Initialize the catalog client.

        Args:
            base_url: Location hosting the cwec_v<version>.xml.zip archives
            timeout: Timeout in seconds applied to the HTTP request
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "CatalogAPI":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def archive_url(self, version: str) -> str:
        return self.ARCHIVE_URL_TEMPLATE.format(base_url=self.base_url, version=version)

    def member_name(self, version: str) -> str:
        return self.MEMBER_NAME_TEMPLATE.format(version=version)

    def fetch_catalog(self, version: str) -> bytes:
        """
        Downloads the catalog archive for the given version and returns the
        raw bytes of the catalog XML file inside it.

        Args:
            version: CWE catalog version, e.g. "4.14"

        Returns:
            The decompressed content of cwec_v<version>.xml

        Raises:
            RetrievalError: If the server does not answer with HTTP 200, the
                transport fails or the download is not a ZIP archive
            MemberNotFoundError: If the archive lacks the catalog file
            FileSystemError: If the staging file cannot be written
        """
        url = self.archive_url(version)
        member = self.member_name(version)

        temp_archive = tempfile.NamedTemporaryFile(prefix="cwec_", suffix=".zip", delete=False)
        temp_archive_path = temp_archive.name
        temp_archive.close()
        logger.debug(f"Staging catalog archive at {temp_archive_path}")

        try:
            self._download_archive(url, temp_archive_path)
            return self._read_member(temp_archive_path, member)
        finally:
            if os.path.exists(temp_archive_path):
                os.remove(temp_archive_path)
                logger.debug(f"Removed staging file {temp_archive_path}")

    def _download_archive(self, url: str, destination: str) -> None:
        logger.info(f"Downloading CWE catalog from {url}")
        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            logger.error("Catalog download connection failed: %s", e, exc_info=True)
            raise RetrievalError(f"Failed to connect to {url}", code="connection_error", details={"url": url, "error": str(e)}) from e
        except requests.exceptions.Timeout as e:
            logger.error("Catalog download timed out: %s", e, exc_info=True)
            raise RetrievalError(f"Request to {url} timed out after {self.timeout} seconds", code="timeout", details={"url": url, "error": str(e)}) from e
        except requests.exceptions.RequestException as e:
            raise RetrievalError(f"Network error while downloading {url}: {e}", details={"url": url}) from e

        try:
            logger.debug("Download Response Status Code: %s", response.status_code)
            logger.debug("Download Response Headers: %s", response.headers)
            if response.status_code != 200:
                raise RetrievalError(
                    f"Expected response code 200, but got: {response.status_code}",
                    code="unexpected_status",
                    details={"url": url, "status_code": response.status_code}
                )

            try:
                with open(destination, 'wb') as staging_file:
                    for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                        if chunk:
                            staging_file.write(chunk)
            except requests.exceptions.RequestException as e:
                raise RetrievalError(f"Download of {url} was interrupted: {e}", code="interrupted", details={"url": url}) from e
            except OSError as e:
                raise FileSystemError(f"Failed to write staging file {destination}: {e}") from e
        finally:
            response.close()

        logger.debug(f"Catalog archive downloaded ({os.path.getsize(destination)} bytes)")

    def _read_member(self, archive_path: str, member: str) -> bytes:
        try:
            with zipfile.ZipFile(archive_path) as archive:
                try:
                    info = archive.getinfo(member)
                except KeyError:
                    raise MemberNotFoundError(
                        f"Dictionary file '{member}' not found in ZIP archive",
                        details={"member": member, "archive_members": archive.namelist()}
                    )
                with archive.open(info) as member_file:
                    content = member_file.read()
        except zipfile.BadZipFile as e:
            raise RetrievalError(f"Downloaded catalog is not a valid ZIP archive: {e}", code="invalid_archive") from e

        logger.info(f"Extracted '{member}' ({len(content)} bytes)")
        return content
