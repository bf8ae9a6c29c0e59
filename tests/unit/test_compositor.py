"""
Unit tests for the pure view compositor and markup helpers.

Tests notebook.features.notebook_view.compositor including:
- Classification into owned / shared-direct / shared-via-folder
- Partitioning without duplicates
- Search matching
"""

from datetime import datetime, timedelta, timezone

from notebook.features.notebook_view import compositor
from notebook.features.notebook_view.domain import NoteKind, NoteSources
from notebook.models.collaborator import Access, FolderCollaborator, NoteCollaborator, Permission
from notebook.models.note import Note
from notebook.utils.markup import markup_to_plain_text

T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make_note(note_id, owner, minutes, folder_id=None, title=None, content=""):
    return Note(
        id=note_id,
        owner_id=owner,
        folder_id=folder_id,
        title=title or note_id,
        content=content,
        created_at=T0 + timedelta(minutes=minutes),
    )


def folder_grant(folder_id, user_id, permission=Permission.VIEW):
    return FolderCollaborator(
        id=f"fc-{folder_id}-{user_id}",
        folder_id=folder_id,
        user_id=user_id,
        permission=permission,
        invited_by="owner",
    )


def note_grant(note_id, user_id, permission=Permission.VIEW):
    return NoteCollaborator(
        id=f"nc-{note_id}-{user_id}",
        note_id=note_id,
        user_id=user_id,
        permission=permission,
        invited_by="owner",
    )


class TestClassify:
    def test_owner(self):
        sources = NoteSources(user_id="u")
        item = compositor.classify(make_note("n", "u", 0), sources)
        assert (item.kind, item.access) == (NoteKind.OWNED, Access.OWNER)

    def test_edit_wins_over_view(self):
        note = make_note("n", "other", 0, folder_id="f")
        sources = NoteSources(
            user_id="u",
            folder_grants=[folder_grant("f", "u", Permission.VIEW)],
            note_grants=[note_grant("n", "u", Permission.EDIT)],
        )
        item = compositor.classify(note, sources)
        assert item.kind == NoteKind.SHARED_VIA_FOLDER
        assert item.access == Access.EDIT

    def test_direct_only(self):
        note = make_note("n", "other", 0, folder_id="f")
        sources = NoteSources(user_id="u", note_grants=[note_grant("n", "u")])
        item = compositor.classify(note, sources)
        assert (item.kind, item.access) == (NoteKind.SHARED_DIRECT, Access.VIEW)


class TestPartitions:
    def setup_method(self):
        self.mine = make_note("mine", "u", 1)
        self.mine_in_shared = make_note("mine-shared", "u", 2, folder_id="shared-f")
        self.theirs_direct = make_note("direct", "other", 3)
        self.theirs_in_folder = make_note("in-folder", "other", 4, folder_id="their-f")
        self.sources = NoteSources(
            user_id="u",
            owned_notes=[self.mine, self.mine_in_shared],
            shared_folder_ids={"shared-f", "their-f"},
            folder_grants=[folder_grant("their-f", "u")],
            note_grants=[note_grant("direct", "u"), note_grant("in-folder", "u")],
            direct_notes=[self.theirs_direct, self.theirs_in_folder],
            folder_notes=[self.theirs_in_folder],
        )

    def test_owned_partition_excludes_shared_folders(self):
        assert [i.id for i in compositor.owned_partition(self.sources)] == ["mine"]

    def test_shared_partition_is_deduplicated(self):
        ids = [i.id for i in compositor.shared_partition(self.sources)]
        assert ids == ["in-folder", "direct", "mine-shared"]

    def test_partitions_are_disjoint_and_cover_everything(self):
        owned = {i.id for i in compositor.owned_partition(self.sources)}
        shared = {i.id for i in compositor.shared_partition(self.sources)}
        assert owned.isdisjoint(shared)
        assert owned | shared == {i.id for i in compositor.all_notes(self.sources)}

    def test_compose_by_folder_id(self):
        items = compositor.compose_notes(self.sources, "their-f")
        assert [i.id for i in items] == ["in-folder"]

    def test_compose_without_filter_returns_all(self):
        assert len(compositor.compose_notes(self.sources, None)) == 4


class TestMatching:
    def test_title_case_insensitive(self):
        assert compositor.matches(make_note("n", "u", 0, title="Weekly REVIEW"), "review")

    def test_content_entities_decoded(self):
        note = make_note("n", "u", 0, title="x", content="<p>Salt &amp; pepper</p>")
        assert compositor.matches(note, "salt & pepper")

    def test_blank_query_matches(self):
        assert compositor.matches(make_note("n", "u", 0), "   ")


class TestMarkupToPlainText:
    def test_paragraphs_do_not_merge(self):
        assert markup_to_plain_text("<h1>Plan</h1><p>Ship &amp; test</p>") == "Plan Ship & test"

    def test_empty(self):
        assert markup_to_plain_text("") == ""

    def test_line_breaks(self):
        assert markup_to_plain_text("one<br>two<br/>three") == "one two three"
