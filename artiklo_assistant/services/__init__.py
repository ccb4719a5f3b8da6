# artiklo_assistant/services/__init__.py
from .draft_request_builder import DraftRequestBuilder, build_draft_request
from .entity_classifier import EntityRole, classify_entity_role
from .input_normalizer import InputNormalizer
from .persistence_gateway import PersistenceGateway, describe_original_text
from .rate_limiter import RateLimiter
from .response_reconciler import ResponseReconciler, classify_response, reconcile
