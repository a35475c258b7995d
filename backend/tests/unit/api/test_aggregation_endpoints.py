"""
Unit Tests for Aggregation API Endpoints
"""
import pytest
from httpx import AsyncClient

from report_portal.api.v1.endpoints.reports import DOCX_MEDIA_TYPE


class TestAccess:
    """Only leaders and reporters may aggregate"""

    @pytest.mark.asyncio
    async def test_member_forbidden(self, client: AsyncClient, auth_headers):
        response = await client.get('/api/v1/aggregation/reports', headers=auth_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_forbidden(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/aggregation/blocks', json={'reportIds': []}, headers=admin_auth_headers)

        assert response.status_code == 403


class TestCandidateList:
    """Test the report picker"""

    @pytest.mark.asyncio
    async def test_own_reports_excluded(self, client: AsyncClient, leader_user, leader_auth_headers,
                                        member_user, make_report):
        await make_report(leader_user, title='Mine')
        await make_report(member_user, title='Theirs')

        response = await client.get('/api/v1/aggregation/reports', headers=leader_auth_headers)

        assert [r['title'] for r in response.json()['items']] == ['Theirs']

    @pytest.mark.asyncio
    async def test_sorted_by_team(self, client: AsyncClient, leader_auth_headers, make_user, make_report):
        kim = await make_user(name='Kim', team_id='T1')
        lee = await make_user(name='Lee', team_id='T2')
        park = await make_user(name='Park', team_id='T1')
        for author in (kim, lee, park):
            await make_report(author)

        response = await client.get(
            '/api/v1/aggregation/reports', params={'sort_by': 'team'}, headers=leader_auth_headers
        )

        assert [r['authorName'] for r in response.json()['items']] == ['Kim', 'Park', 'Lee']

    @pytest.mark.asyncio
    @pytest.mark.parametrize('jump_to', ['0', '2', 'abc'])
    async def test_jump_out_of_range(self, client: AsyncClient, leader_auth_headers, jump_to):
        response = await client.get(
            '/api/v1/aggregation/reports', params={'jump_to': jump_to}, headers=leader_auth_headers
        )
        body = response.json()

        assert response.status_code == 400
        assert body['success'] is False
        assert body['error']['code'] == 'PAGE_OUT_OF_RANGE'
        assert body['error']['message'] == 'Enter a page number between 1 and 1.'

    @pytest.mark.asyncio
    async def test_jump_to_page(self, client: AsyncClient, leader_auth_headers, member_user, make_report):
        for _ in range(3):
            await make_report(member_user)

        response = await client.get(
            '/api/v1/aggregation/reports',
            params={'jump_to': '2', 'page_size': 2},
            headers=leader_auth_headers
        )

        assert response.status_code == 200
        assert response.json()['page'] == 2
        assert len(response.json()['items']) == 1


class TestMerge:
    """Test block building, saving and export"""

    @pytest.mark.asyncio
    async def test_blocks(self, client: AsyncClient, leader_auth_headers, member_user, make_report):
        first = await make_report(member_user, title='First')
        second = await make_report(member_user, title='Second')

        response = await client.post(
            '/api/v1/aggregation/blocks',
            json={'reportIds': [second.report_id, first.report_id]},
            headers=leader_auth_headers
        )
        data = response.json()

        assert response.status_code == 200
        assert data['reportCount'] == 2
        assert data['blocks'][0]['type'] == 'info_header'
        assert '1. Second' in data['blocks'][1]['content']

    @pytest.mark.asyncio
    async def test_save_aggregate(self, client: AsyncClient, leader_user, leader_auth_headers,
                                  member_user, make_report):
        report = await make_report(member_user)

        response = await client.post(
            '/api/v1/aggregation/save',
            json={'reportIds': [report.report_id], 'title': 'Team summary'},
            headers=leader_auth_headers
        )
        data = response.json()

        assert response.status_code == 200
        assert data['authorId'] == leader_user.id
        assert data['content']['blocks'][0]['type'] == 'info_header'

    @pytest.mark.asyncio
    async def test_save_empty_selection(self, client: AsyncClient, leader_auth_headers):
        response = await client.post(
            '/api/v1/aggregation/save',
            json={'reportIds': [], 'title': 'Nothing'},
            headers=leader_auth_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_export_docx(self, client: AsyncClient, leader_auth_headers, member_user, make_report):
        report = await make_report(member_user)

        response = await client.post(
            '/api/v1/aggregation/export/docx',
            json={'reportIds': [report.report_id]},
            headers=leader_auth_headers
        )

        assert response.status_code == 200
        assert response.headers['content-type'] == DOCX_MEDIA_TYPE
        assert 'Aggregated%20Report' in response.headers['content-disposition']

    @pytest.mark.asyncio
    async def test_export_unknown_format(self, client: AsyncClient, leader_auth_headers):
        response = await client.post(
            '/api/v1/aggregation/export/pdf', json={'reportIds': []}, headers=leader_auth_headers
        )

        assert response.status_code == 422
