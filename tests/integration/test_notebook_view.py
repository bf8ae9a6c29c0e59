"""
Integration tests for the merged notebook view.

Tests NotebookViewService including:
- "owned-unfiled" never listing notes from shared folders
- "shared" listing folder notes even without a per-note grant
- Folder filters, de-duplication and ordering
- Full-text search over titles and stripped content
- Folder listing with shared flags
"""

from notebook.features.notebook_view.domain import FolderOrder, NoteKind
from notebook.models.collaborator import Access, Permission
from tests.factories import ALICE, BOB, CAROL, create_folder, create_note


def titles(items):
    return [item.title for item in items]


class TestScenarioWorkFolder:
    """A shares folder Work (containing Plan) with B at edit"""

    async def test_shared_partition_and_owned_partition(self, db, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_note(notes, ALICE, "Plan", folder_id=work.id, content="v1")
        await sharing.share_folder(work.id, ALICE, BOB, Permission.EDIT)

        assert titles(await view.list_notes(BOB, "shared")) == ["Plan"]
        assert "Plan" not in titles(await view.list_notes(ALICE, "owned-unfiled"))

    async def test_note_created_later_is_visible_to_collaborator(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_note(notes, ALICE, "Plan", folder_id=work.id)
        await sharing.share_folder(work.id, ALICE, BOB, Permission.EDIT)

        await create_note(notes, ALICE, "Draft2", folder_id=work.id)

        assert titles(await view.list_notes(BOB, "shared")) == ["Draft2", "Plan"]


class TestPartitions:
    """Owned / shared partitioning"""

    async def test_folder_notes_visible_without_note_grant(self, db, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_note(notes, ALICE, "Plan", folder_id=work.id)
        await create_note(notes, ALICE, "Memo", folder_id=work.id)
        await sharing.share_folder(work.id, ALICE, BOB, Permission.VIEW)
        db.tables["note_collaborators"].clear()

        shared = await view.list_notes(BOB, "shared")

        assert titles(shared) == ["Memo", "Plan"]
        assert {item.kind for item in shared} == {NoteKind.SHARED_VIA_FOLDER}
        assert {item.access for item in shared} == {Access.VIEW}

    async def test_owned_unfiled_excludes_every_shared_folder_note(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        home = await create_folder(notes, ALICE, "Home")
        await create_note(notes, ALICE, "Loose")
        await create_note(notes, ALICE, "Groceries", folder_id=home.id)
        await create_note(notes, ALICE, "Plan", folder_id=work.id)
        await sharing.share_folder(work.id, ALICE, BOB)

        owned = await view.list_notes(ALICE, "owned-unfiled")

        assert titles(owned) == ["Groceries", "Loose"]
        assert all(item.kind == NoteKind.OWNED for item in owned)

    async def test_owner_sees_own_shared_folder_notes_under_shared(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_note(notes, ALICE, "Plan", folder_id=work.id)
        await sharing.share_folder(work.id, ALICE, BOB)

        shared = await view.list_notes(ALICE, "shared")

        assert titles(shared) == ["Plan"]
        assert shared[0].access == Access.OWNER

    async def test_direct_and_folder_grants_are_deduplicated(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        plan = await create_note(notes, ALICE, "Plan", folder_id=work.id)
        await sharing.share_note(plan.id, ALICE, BOB, Permission.VIEW)
        await sharing.share_folder(work.id, ALICE, BOB, Permission.EDIT)

        shared = await view.list_notes(BOB, "shared")

        assert titles(shared) == ["Plan"]
        assert shared[0].kind == NoteKind.SHARED_VIA_FOLDER
        assert shared[0].access == Access.EDIT

    async def test_direct_share_listed_as_direct(self, notes, sharing, view):
        plan = await create_note(notes, ALICE, "Plan")
        await sharing.share_note(plan.id, ALICE, BOB, Permission.EDIT)

        shared = await view.list_notes(BOB, "shared")

        assert shared[0].kind == NoteKind.SHARED_DIRECT
        assert shared[0].access == Access.EDIT
        # a direct share alone does not make the owner's note leave "owned-unfiled"
        assert titles(await view.list_notes(ALICE, "owned-unfiled")) == ["Plan"]

    async def test_unshared_folder_leaves_orphaned_note_grants(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_note(notes, ALICE, "Plan", folder_id=work.id)
        await sharing.share_folder(work.id, ALICE, BOB)

        await sharing.unshare_folder(work.id, ALICE, BOB)

        # still visible through the materialized per-note grant
        shared = await view.list_notes(BOB, "shared")
        assert titles(shared) == ["Plan"]
        assert shared[0].kind == NoteKind.SHARED_DIRECT
        # the folder has no collaborators left, so it is back with the owner's own notes
        assert titles(await view.list_notes(ALICE, "owned-unfiled")) == ["Plan"]

    async def test_folder_filter(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_note(notes, ALICE, "Plan", folder_id=work.id)
        await create_note(notes, ALICE, "Loose")
        await sharing.share_folder(work.id, ALICE, BOB)

        assert titles(await view.list_notes(ALICE, work.id)) == ["Plan"]
        assert titles(await view.list_notes(BOB, work.id)) == ["Plan"]
        assert titles(await view.list_notes(CAROL, work.id)) == []

    async def test_all_filter_lists_each_note_once(self, notes, sharing, view):
        work = await create_folder(notes, BOB, "Team")
        await sharing.share_folder(work.id, BOB, ALICE, Permission.EDIT)
        await create_note(notes, ALICE, "Mine")
        await create_note(notes, ALICE, "In team folder", folder_id=work.id)

        everything = await view.list_notes(ALICE, "all")

        assert titles(everything) == ["In team folder", "Mine"]

    async def test_results_newest_first(self, notes, view):
        for title in ("first", "second", "third"):
            await create_note(notes, ALICE, title)

        assert titles(await view.list_notes(ALICE, "owned-unfiled")) == ["third", "second", "first"]

    async def test_no_user_means_empty_view_and_no_reads(self, db, notes, view):
        await create_note(notes, ALICE, "Plan")
        calls_before = len(db.calls)

        assert await view.list_notes(None, "owned-unfiled") == []
        assert await view.search_notes(None, "plan") == []
        assert await view.list_folders(None) == []
        assert len(db.calls) == calls_before

    async def test_view_reflects_latest_state(self, notes, sharing, view):
        plan = await create_note(notes, ALICE, "Plan")
        assert await view.list_notes(BOB, "shared") == []

        await sharing.share_note(plan.id, ALICE, BOB)
        assert titles(await view.list_notes(BOB, "shared")) == ["Plan"]

        await sharing.unshare_note(plan.id, ALICE, BOB)
        assert await view.list_notes(BOB, "shared") == []


class TestSearch:
    """Full-text search"""

    async def test_search_matches_title_and_plain_content(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_note(notes, ALICE, "Quarterly Plan", folder_id=work.id)
        await create_note(notes, ALICE, "Shopping", content="<ul><li>Oat <b>milk</b></li></ul>")
        await create_note(notes, ALICE, "Other", content='<a href="milk.html">link</a>')
        await sharing.share_folder(work.id, ALICE, BOB)

        assert titles(await view.search_notes(ALICE, "PLAN")) == ["Quarterly Plan"]
        assert titles(await view.search_notes(ALICE, "oat milk")) == ["Shopping"]
        assert titles(await view.search_notes(BOB, "quarterly")) == ["Quarterly Plan"]

    async def test_search_ignores_markup_tags(self, notes, view):
        await create_note(notes, ALICE, "Styled", content="<strong>bold</strong> text")

        assert await view.search_notes(ALICE, "strong") == []


class TestListFolders:
    """Folder listing"""

    async def test_owned_and_shared_folders(self, notes, sharing, view):
        work = await create_folder(notes, ALICE, "Work")
        await create_folder(notes, ALICE, "Home")
        team = await create_folder(notes, BOB, "Team")
        await sharing.share_folder(work.id, ALICE, BOB, Permission.VIEW)
        await sharing.share_folder(team.id, BOB, ALICE, Permission.EDIT)

        folders = {f.name: f for f in await view.list_folders(ALICE)}

        assert folders["Work"].is_owner and folders["Work"].is_shared
        assert folders["Home"].is_owner and not folders["Home"].is_shared
        assert not folders["Team"].is_owner and folders["Team"].is_shared
        assert folders["Team"].permission == Permission.EDIT

    async def test_folder_order(self, notes, view):
        for name in ("beta", "Alpha", "gamma"):
            await create_folder(notes, ALICE, name)

        by_date = await view.list_folders(ALICE)
        by_name = await view.list_folders(ALICE, FolderOrder.NAME)

        assert [f.name for f in by_date] == ["gamma", "Alpha", "beta"]
        assert [f.name for f in by_name] == ["Alpha", "beta", "gamma"]
