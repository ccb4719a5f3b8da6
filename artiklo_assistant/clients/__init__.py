# artiklo_assistant/clients/__init__.py
from .base_client import SupabaseBaseClient, SupabaseHttpClient
from .function_client import DraftClient, EdgeFunctionClient, SimplifyClient
from .storage_client import StorageClient
