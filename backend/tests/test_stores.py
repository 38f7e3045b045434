"""
Soft-delete store tests for inventory items and training documents,
running the async client core against the Flask app.
"""

import asyncio
import functools

import httpx
import pytest

from trainhub.client.errors import (
    ApplicationError,
    NetworkError,
    NotFoundError,
    NotSignedInError,
    OwnershipError,
    TransitionError,
    ValidationError,
    user_message,
)
from trainhub.client.inventory import InventoryStore
from trainhub.client.training import TrainingDraft, TrainingStore
from trainhub.client.transport import Transport
from trainhub.extensions import db
from trainhub.models import User
from trainhub.services import barcode_service

from conftest import BASE_URL, DRILL, create_training, flask_transport, make_session


def _inventory(transport, principal):
    return InventoryStore(transport, make_session(transport, principal))


def _trainings(transport, principal):
    return TrainingStore(transport, make_session(transport, principal))


# =============================================================================
# INVENTORY
# =============================================================================


@pytest.mark.inventory
class TestInventoryStore:
    def test_add_persists_then_publishes(self, transport, alice):
        store = _inventory(transport, alice)

        item = asyncio.run(store.add(DRILL))

        assert [i.id for i in store.active] == [item.id]
        assert item.need == 5
        assert store.generation == 1
        record = db.session.query(User).filter_by(email=alice.email).one()
        assert record.inventory[0]['id'] == item.id

    def test_remove_restore_round_trip(self, transport, alice):
        store = _inventory(transport, alice)

        async def scenario():
            item = await store.add(DRILL)
            await store.remove(item.id)
            assert store.active == ()
            assert [i.id for i in store.deleted] == [item.id]
            await store.restore(item.id)
            return item

        item = asyncio.run(scenario())
        assert store.active == (item,)
        assert store.deleted == ()

    def test_purge_requires_bin(self, transport, alice):
        store = _inventory(transport, alice)

        async def scenario():
            item = await store.add(DRILL)
            with pytest.raises(TransitionError) as exc:
                await store.purge(item.id)
            assert 'recycling bin' in str(exc.value)
            await store.refresh()
            return item

        item = asyncio.run(scenario())
        assert store.active == (item,)

    def test_purge_from_bin(self, transport, alice):
        store = _inventory(transport, alice)

        async def scenario():
            item = await store.add(DRILL)
            await store.remove(item.id)
            await store.purge(item.id)

        asyncio.run(scenario())
        assert store.active == () and store.deleted == ()
        record = db.session.query(User).filter_by(email=alice.email).one()
        assert record.inventory == [] and record.deleted_inventory == []

    def test_validation_before_network(self, alice):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        transport = Transport(BASE_URL, transport=httpx.MockTransport(handler))
        store = _inventory(transport, alice)
        with pytest.raises(ValidationError):
            asyncio.run(store.add({'description': '', 'quantity': 1}))
        with pytest.raises(ValidationError):
            asyncio.run(store.add({'description': 'Drill', 'quantity': '2.5'}))
        assert calls == []

    def test_unknown_ref(self, transport, alice):
        store = _inventory(transport, alice)
        with pytest.raises(NotFoundError):
            asyncio.run(store.remove('no-such-item'))

    def test_signed_out(self, transport):
        store = InventoryStore(transport, make_session(transport))
        with pytest.raises(NotSignedInError):
            asyncio.run(store.add(DRILL))

    def test_update_active_item(self, transport, alice):
        store = _inventory(transport, alice)

        async def scenario():
            item = await store.add(DRILL)
            return item, await store.update(item.id, {'quantity': 10})

        item, updated = asyncio.run(scenario())
        assert updated.id == item.id
        assert updated.need == 0
        assert store.active == (updated,)

    def test_update_deleted_item_rejected(self, transport, alice):
        store = _inventory(transport, alice)

        async def scenario():
            item = await store.add(DRILL)
            await store.remove(item.id)
            with pytest.raises(TransitionError):
                await store.update(item.id, {'quantity': 10})

        asyncio.run(scenario())

    def test_legacy_items_addressable(self, transport, alice):
        record = db.session.query(User).filter_by(email=alice.email).one()
        record.inventory = ['Hammer', 'Level', 'Cordless Drill']
        db.session.commit()

        store = _inventory(transport, alice)

        async def scenario():
            await store.refresh()
            await store.remove('legacy-3')

        asyncio.run(scenario())
        assert [i.description for i in store.active] == ['Hammer', 'Level']
        drill = store.deleted[0]
        assert (drill.id, drill.code, drill.number, drill.quantity, drill.target_quantity) == (
            'legacy-3', 'LEGACY-3', '3', 1, 1,
        )

    def test_operations_commit_in_issue_order(self, transport, alice):
        store = _inventory(transport, alice)

        async def scenario():
            item = await store.add(DRILL)
            await asyncio.gather(store.remove(item.id), store.restore(item.id))
            return item

        item = asyncio.run(scenario())
        assert [i.id for i in store.active] == [item.id]
        assert store.deleted == ()
        assert store.generation == 3

    def test_persistence_failure_leaves_snapshot(self, client, alice):
        bridge = flask_transport(client)

        def handler(request):
            if request.method == 'POST' and request.url.path == '/api/user':
                raise httpx.ConnectError('connection dropped', request=request)
            return bridge.handler(request)

        transport = Transport(BASE_URL, transport=httpx.MockTransport(handler))
        store = _inventory(transport, alice)

        async def scenario():
            await store.refresh()
            before = (store.snapshot, store.generation)
            with pytest.raises(NetworkError):
                await store.add(DRILL)
            return before

        before = asyncio.run(scenario())
        assert (store.snapshot, store.generation) == before

    def test_lookup_barcode_requires_upc(self, transport, alice):
        with pytest.raises(ValidationError):
            asyncio.run(_inventory(transport, alice).lookup_barcode('  '))

    def test_lookup_barcode_failure_shows_fixed_message(self, monkeypatch, transport, alice):
        def refuse(request):
            raise httpx.ConnectError('[Errno 111] Connection refused', request=request)

        monkeypatch.setattr(
            barcode_service, 'lookup_barcode',
            functools.partial(barcode_service.lookup_barcode, transport=httpx.MockTransport(refuse)),
        )
        with pytest.raises(ApplicationError) as exc:
            asyncio.run(_inventory(transport, alice).lookup_barcode('012345678905'))

        message = user_message(exc.value)
        assert message == 'Product lookup is unavailable. Please try again.'
        assert 'Errno' not in message and 'network' not in message.lower()


# =============================================================================
# TRAININGS
# =============================================================================


@pytest.mark.training
class TestTrainingStore:
    def test_add_and_round_trip(self, transport, alice):
        store = _trainings(transport, alice)

        async def scenario():
            doc = await store.add({
                'title': 'Ladder Safety',
                'blocks': [{'type': 'text', 'content': {'text': 'Three points of contact'}}],
            })
            await store.remove(doc.id)
            assert store.active == ()
            assert [d.id for d in store.deleted] == [doc.id]
            await store.restore(doc.id)
            return doc

        doc = asyncio.run(scenario())
        restored = store.active[0]
        assert restored.id == doc.id
        assert (restored.title, restored.description, restored.blocks) == (doc.title, doc.description, doc.blocks)
        assert restored.deleted_at is None
        assert store.deleted == ()

    def test_purge_active_fails(self, transport, alice):
        store = _trainings(transport, alice)

        async def scenario():
            doc = await store.add({'title': 'Ladder Safety'})
            with pytest.raises(TransitionError):
                await store.purge(doc.id)
            await store.refresh()
            return doc

        doc = asyncio.run(scenario())
        assert [d.id for d in store.active] == [doc.id]

    def test_non_owner_cannot_remove(self, client, transport, alice, bob):
        doc = create_training(client, alice.email)
        store = _trainings(transport, bob)

        async def scenario():
            with pytest.raises(OwnershipError) as exc:
                await store.remove(doc['id'])
            assert isinstance(exc.value, ApplicationError)
            await store.refresh()

        asyncio.run(scenario())
        assert [d.id for d in store.active] == [doc['id']]
        assert store.mine() == []

    def test_server_enforces_ownership_too(self, client, transport, alice, bob):
        doc = create_training(client, alice.email)
        store = _trainings(transport, bob)
        # bypass the local check
        store.adapter.may_modify = lambda item, principal: True
        with pytest.raises(OwnershipError):
            asyncio.run(store.remove(doc['id']))

    def test_update(self, transport, alice):
        store = _trainings(transport, alice)

        async def scenario():
            doc = await store.add({'title': 'Ladder Safety'})
            return await store.update(doc.id, {
                'title': 'Ladder Safety 2',
                'blocks': [{'type': 'divider'}, {'type': 'quote', 'content': {'text': 'Look up'}}],
            })

        updated = asyncio.run(scenario())
        assert updated.title == 'Ladder Safety 2'
        assert [(b['type'], b['order']) for b in updated.blocks] == [('divider', 0), ('quote', 1)]
        assert store.active[0].title == 'Ladder Safety 2'

    def test_update_clears_description(self, transport, alice):
        store = _trainings(transport, alice)

        async def scenario():
            doc = await store.add({'title': 'Ladder Safety', 'description': 'old'})
            updated = await store.update(doc.id, {'description': ''})
            await store.refresh()
            return updated

        updated = asyncio.run(scenario())
        assert updated.description == ''
        assert store.active[0].description == ''
        assert store.active[0].title == 'Ladder Safety'

    def test_get(self, client, transport, alice):
        doc = create_training(client, alice.email)
        store = _trainings(transport, alice)
        assert asyncio.run(store.get(doc['id'])).title == 'Forklift Safety'
        with pytest.raises(NotFoundError):
            asyncio.run(store.get('missing'))
        with pytest.raises(ValidationError):
            asyncio.run(store.get(''))

    def test_title_validated_locally(self, alice):
        def handler(request):
            raise AssertionError('no request expected')

        transport = Transport(BASE_URL, transport=httpx.MockTransport(handler))
        with pytest.raises(ValidationError):
            asyncio.run(_trainings(transport, alice).add({'title': '  '}))


@pytest.mark.training
class TestTrainingDraft:
    def test_block_editing_keeps_order_dense(self):
        draft = TrainingDraft(title='Ladder Safety')
        first = draft.add_block('title', {'text': 'Intro'})
        second = draft.add_block('text', {'text': 'Body'})
        third = draft.add_block('divider')

        draft.move_block(third['id'], 0)
        assert [b['id'] for b in draft.blocks] == [third['id'], first['id'], second['id']]
        draft.remove_block(first['id'])
        assert [b['order'] for b in draft.blocks] == [0, 1]

        with pytest.raises(ValidationError):
            draft.add_block('hologram', {})

    def test_submit_uploads_then_creates(self, transport, alice):
        store = _trainings(transport, alice)
        draft = TrainingDraft(title='Ladder Safety', description='Basics')
        draft.add_block('text', {'text': 'Watch this first'})
        draft.attach('video', 'ladder.mp4', b'\x00\x01', 'video/mp4')
        draft.attach('image', 'ladder.png', b'\x89PNG', 'image/png')

        doc = asyncio.run(draft.submit(store))

        assert [b['type'] for b in doc.blocks] == ['text', 'video', 'image']
        assert doc.blocks[1]['content']['url'].startswith('/uploads/videos/')
        assert doc.blocks[2]['content']['alt'] == 'ladder.png'
        assert draft.uploads == []

    def test_retry_after_partial_upload_failure(self, transport, alice):
        store = _trainings(transport, alice)
        draft = TrainingDraft(title='Ladder Safety')
        draft.attach('video', 'ladder.mp4', b'\x00\x01', 'video/mp4')
        draft.attach('image', 'ladder.bmp', b'BM', 'image/bmp')

        with pytest.raises(ValidationError):
            asyncio.run(draft.submit(store))
        assert [b['type'] for b in draft.blocks] == ['video']
        assert [u.filename for u in draft.uploads] == ['ladder.bmp']

        draft.uploads.clear()
        doc = asyncio.run(draft.submit(store))
        assert [b['type'] for b in doc.blocks] == ['video']

    def test_upload_type_checked_locally(self, transport, alice):
        store = _trainings(transport, alice)
        with pytest.raises(ValidationError):
            asyncio.run(store.upload_video('notes.txt', b'hi', 'text/plain'))
        with pytest.raises(ValidationError):
            asyncio.run(store.upload_image('logo.svg', b'<svg/>', 'image/svg+xml'))
