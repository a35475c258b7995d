"""
Unit Tests for Notice Board API Endpoints
"""
import pytest
from httpx import AsyncClient

from report_portal.api.v1.endpoints.reports import DOCX_MEDIA_TYPE


async def write_post(client: AsyncClient, headers, title='Holiday schedule', content='Office closed\nBack Monday'):
    response = await client.post('/api/v1/posts', json={'title': title, 'content': content}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestBoard:
    """Test writing and reading posts"""

    @pytest.mark.asyncio
    async def test_requires_login(self, client: AsyncClient):
        response = await client.get('/api/v1/posts')

        assert response.status_code in [401, 403]

    @pytest.mark.asyncio
    async def test_write_then_list(self, client: AsyncClient, auth_headers, member_user):
        created = await write_post(client, auth_headers)
        assert created['author'] == member_user.name
        assert created['authorId'] == member_user.id

        response = await client.get('/api/v1/posts', headers=auth_headers)
        data = response.json()

        assert response.status_code == 200
        assert data['total'] == 1
        assert data['pageSize'] == 10
        assert data['items'][0]['postId'] == created['postId']

    @pytest.mark.asyncio
    async def test_blank_title(self, client: AsyncClient, auth_headers):
        response = await client.post('/api/v1/posts', json={'title': ' ', 'content': 'Body'}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()['error']['message'] == 'Enter a title.'

    @pytest.mark.asyncio
    async def test_get_missing(self, client: AsyncClient, auth_headers):
        response = await client.get('/api/v1/posts/missing', headers=auth_headers)

        assert response.status_code == 404


class TestEditAndDelete:
    """Test author-only editing"""

    @pytest.mark.asyncio
    async def test_author_edits(self, client: AsyncClient, auth_headers):
        created = await write_post(client, auth_headers)

        response = await client.patch(
            f"/api/v1/posts/{created['postId']}", json={'content': 'Closed until Tuesday'}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()['content'] == 'Closed until Tuesday'
        assert response.json()['title'] == 'Holiday schedule'

    @pytest.mark.asyncio
    async def test_other_user_cannot_edit(self, client: AsyncClient, auth_headers, leader_auth_headers):
        created = await write_post(client, auth_headers)

        response = await client.patch(
            f"/api/v1/posts/{created['postId']}", json={'title': 'Mine now'}, headers=leader_auth_headers
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_author_deletes(self, client: AsyncClient, auth_headers):
        created = await write_post(client, auth_headers)

        response = await client.delete(f"/api/v1/posts/{created['postId']}", headers=auth_headers)
        assert response.status_code == 200

        response = await client.get(f"/api/v1/posts/{created['postId']}", headers=auth_headers)
        assert response.status_code == 404


class TestExport:

    @pytest.mark.asyncio
    async def test_export_docx(self, client: AsyncClient, auth_headers):
        created = await write_post(client, auth_headers, title='Holiday')

        response = await client.post(f"/api/v1/posts/{created['postId']}/export/docx", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers['content-type'] == DOCX_MEDIA_TYPE
        assert 'filename="[Post]_Holiday.docx"' in response.headers['content-disposition']
        assert response.content[:2] == b'PK'
