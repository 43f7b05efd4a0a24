"""Shared application state - service instances built from configuration."""

from app import config
from app.services.blob_store import BlobStore
from app.services.catalog_service import CatalogService
from app.services.record_store import RecordStore
from app.services.session_authority import SessionAuthority

# Service instances
blobs = BlobStore(config.UPLOADS_DIR)
records = RecordStore(config.DB_FILE)
catalog = CatalogService(records, blobs)

# In-memory sessions: valid tokens live only as long as this process
sessions = SessionAuthority(config.ADMIN_USERNAME, config.ADMIN_PASSWORD)
