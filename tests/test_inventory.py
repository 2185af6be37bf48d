import pytest
from httpx import AsyncClient

from models import InventoryItem

JACKET = {'item_name': 'Jacket', 'category': 'clothing', 'quantity': 5}


@pytest.mark.asyncio
async def test_inventory_requires_authentication(client: AsyncClient):
    response = await client.get('/api/inventory')

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_user_lists_inventory_sorted_by_category_and_name(client: AsyncClient, user_headers, database):
    with database.SessionLocal() as db:
        db.add_all([
            InventoryItem(item_name='Scarf', category='clothing', quantity=2),
            InventoryItem(item_name='Rice', category='food', quantity=10),
            InventoryItem(item_name='Coat', category='clothing', quantity=1),
        ])
        db.commit()

    response = await client.get('/api/inventory', headers=user_headers)

    assert response.status_code == 200
    assert [i['item_name'] for i in response.json()['inventory']] == ['Coat', 'Scarf', 'Rice']


@pytest.mark.asyncio
async def test_admin_creates_item(client: AsyncClient, admin_headers):
    response = await client.post('/api/inventory', headers=admin_headers, json={
        **JACKET, 'size': 'M',
    })

    assert response.status_code == 201
    item = response.json()['item']
    assert item['item_name'] == 'Jacket'
    assert item['quantity'] == 5
    assert item['size'] == 'M'
    assert item['last_updated'] is not None


@pytest.mark.asyncio
async def test_quantity_defaults_to_zero(client: AsyncClient, admin_headers):
    response = await client.post('/api/inventory', headers=admin_headers, json={
        'item_name': 'Socks', 'category': 'clothing',
    })

    assert response.status_code == 201
    assert response.json()['item']['quantity'] == 0


@pytest.mark.asyncio
async def test_non_admin_cannot_create_item(client: AsyncClient, user_headers, database):
    response = await client.post('/api/inventory', headers=user_headers, json=JACKET)

    assert response.status_code == 403
    with database.SessionLocal() as db:
        assert db.query(InventoryItem).count() == 0


@pytest.mark.asyncio
async def test_reject_item_with_missing_fields(client: AsyncClient, admin_headers):
    response = await client.post('/api/inventory', headers=admin_headers, json={'item_name': 'Jacket'})

    assert response.status_code == 400
    assert 'required' in response.json()['error']


@pytest.mark.asyncio
async def test_reject_item_with_negative_quantity(client: AsyncClient, admin_headers):
    response = await client.post('/api/inventory', headers=admin_headers, json={**JACKET, 'quantity': -5})

    assert response.status_code == 400
    assert response.json() == {'error': 'Quantity cannot be negative'}


@pytest.mark.asyncio
async def test_item_lifecycle(client: AsyncClient, admin_headers):
    created = await client.post('/api/inventory', headers=admin_headers, json=JACKET)
    assert created.status_code == 201
    item_id = created.json()['item']['id']

    fetched = await client.get(f'/api/inventory/{item_id}', headers=admin_headers)
    assert fetched.status_code == 200
    assert fetched.json()['item']['quantity'] == 5

    rejected = await client.put(f'/api/inventory/{item_id}', headers=admin_headers, json={**JACKET, 'quantity': -1})
    assert rejected.status_code == 400

    refetched = await client.get(f'/api/inventory/{item_id}', headers=admin_headers)
    assert refetched.json()['item']['quantity'] == 5


@pytest.mark.asyncio
async def test_admin_updates_item(client: AsyncClient, admin_headers):
    created = await client.post('/api/inventory', headers=admin_headers, json=JACKET)
    item_id = created.json()['item']['id']

    response = await client.put(f'/api/inventory/{item_id}', headers=admin_headers, json={
        'item_name': 'Winter Jacket', 'category': 'clothing', 'quantity': 8, 'size': 'L',
    })

    assert response.status_code == 200
    item = response.json()['item']
    assert item['item_name'] == 'Winter Jacket'
    assert item['quantity'] == 8
    assert item['size'] == 'L'
    assert item['last_updated'] >= created.json()['item']['last_updated']


@pytest.mark.asyncio
async def test_update_missing_item_returns_404(client: AsyncClient, admin_headers):
    response = await client.put('/api/inventory/999', headers=admin_headers, json=JACKET)

    assert response.status_code == 404
    assert response.json() == {'error': 'Item not found'}


@pytest.mark.asyncio
async def test_user_fetches_item(client: AsyncClient, user_headers, database):
    with database.SessionLocal() as db:
        item = InventoryItem(item_name='Rice', category='food', quantity=10)
        db.add(item)
        db.commit()
        item_id = item.id

    response = await client.get(f'/api/inventory/{item_id}', headers=user_headers)

    assert response.status_code == 200
    assert response.json()['item']['item_name'] == 'Rice'


@pytest.mark.asyncio
async def test_get_missing_item_returns_404(client: AsyncClient, user_headers):
    response = await client.get('/api/inventory/999', headers=user_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_deletes_item(client: AsyncClient, admin_headers):
    created = await client.post('/api/inventory', headers=admin_headers, json=JACKET)
    item_id = created.json()['item']['id']

    response = await client.delete(f'/api/inventory/{item_id}', headers=admin_headers)

    assert response.status_code == 200
    missing = await client.get(f'/api/inventory/{item_id}', headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_non_admin_cannot_delete_item(client: AsyncClient, admin_headers, user_headers):
    created = await client.post('/api/inventory', headers=admin_headers, json=JACKET)
    item_id = created.json()['item']['id']

    response = await client.delete(f'/api/inventory/{item_id}', headers=user_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_reject_boolean_quantity(client: AsyncClient, admin_headers, database):
    response = await client.post('/api/inventory', headers=admin_headers, json={**JACKET, 'quantity': True})

    assert response.status_code == 400
    assert response.json()['error'].startswith('quantity: ')
    with database.SessionLocal() as db:
        assert db.query(InventoryItem).count() == 0
