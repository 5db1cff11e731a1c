"""
Storage singletons shared by the API.
create_app() rebinds both to the configured database URL and blob root.
"""
from models.db_storage import DBStorage
from models.blob_storage import BlobStorage

storage = DBStorage()
blobs = BlobStorage()
