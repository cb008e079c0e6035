"""
FastAPI dependencies - injection for the Elasticsearch client and search service.
Tests override get_elasticsearch to run against an in-memory index.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import Depends

from coursefinder.search.elasticsearch_client import get_elasticsearch
from coursefinder.services.course_search_service import CourseSearchService

ElasticsearchClient = Annotated[AsyncElasticsearch, Depends(get_elasticsearch)]


def get_course_search_service(es: ElasticsearchClient) -> CourseSearchService:
    """Factory for service with client injection (Dependency Inversion)."""
    return CourseSearchService(es)


SearchService = Annotated[CourseSearchService, Depends(get_course_search_service)]
