from .base_client import BaseAPIClient
from .trailblazers_client import TrailblazersClient
