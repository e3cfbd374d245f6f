from fastapi import Request

from imagepost.services.post_service import PostService


def get_post_service(request: Request) -> PostService:
    """
    Return the PostService built by the app factory.
    """
    return request.app.state.post_service
