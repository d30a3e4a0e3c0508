"""Tests for the per-document id allocator."""

from lxml import etree

from python_docx_projection import Document
from python_docx_projection.allocator import IdAllocator, max_drawing_id, max_relationship_number
from python_docx_projection.constants import PACKAGE_RELATIONSHIPS_NAMESPACE, r, w

RELS = f"""<Relationships xmlns="{PACKAGE_RELATIONSHIPS_NAMESPACE}">
  <Relationship Id="rId3" Type="t" Target="a.xml"/>
  <Relationship Id="rId12" Type="t" Target="b.xml"/>
  <Relationship Id="custom" Type="t" Target="c.xml"/>
</Relationships>"""


class TestIdAllocator:
    """Tests for IdAllocator counters."""

    def test_relationship_ids_increase(self):
        """Test that relationship ids are handed out in order."""
        allocator = IdAllocator(next_relationship_id=5)
        assert allocator.allocate_relationship_id() == "rId5"
        assert allocator.allocate_relationship_id() == "rId6"
        assert allocator.next_relationship_number == 7

    def test_drawing_ids_increase(self):
        """Test that drawing ids are handed out in order."""
        allocator = IdAllocator()
        assert [allocator.allocate_drawing_id() for _ in range(3)] == [1, 2, 3]

    def test_counters_start_at_one(self):
        """Test that non-positive seeds are raised to 1."""
        allocator = IdAllocator(0, -4)
        assert allocator.allocate_relationship_id() == "rId1"
        assert allocator.allocate_drawing_id() == 1

    def test_reserve_only_moves_forward(self):
        """Test that reserving a lower number has no effect."""
        allocator = IdAllocator(next_relationship_id=10)
        allocator.reserve_relationship_number(4)
        assert allocator.next_relationship_number == 10
        allocator.reserve_relationship_number(20)
        assert allocator.allocate_relationship_id() == "rId21"

    def test_reserve_drawing_id(self):
        """Test reserving a drawing id."""
        allocator = IdAllocator()
        allocator.reserve_drawing_id(9)
        assert allocator.allocate_drawing_id() == 10

    def test_repr(self):
        """Test the repr shows both counters."""
        assert repr(IdAllocator(3, 4)) == "<IdAllocator next_rel=rId3 next_drawing=4>"


class TestSeeding:
    """Tests for seeding counters from existing parts."""

    def test_max_relationship_number(self):
        """Test that the largest rIdN wins and non-matching ids are ignored."""
        assert max_relationship_number(etree.fromstring(RELS)) == 12
        assert max_relationship_number(None) == 0

    def test_max_drawing_id(self):
        """Test that docPr and cNvPr ids are both considered."""
        root = etree.fromstring(
            '<root xmlns:wp="urn:wp" xmlns:wps="urn:wps">'
            '<wp:docPr id="4"/><wps:cNvPr id="11"/><wp:docPr id="bad"/>'
            "</root>"
        )
        assert max_drawing_id([root]) == 11
        assert max_drawing_id([]) == 0

    def test_from_parts(self):
        """Test that counters start one past the largest existing ids."""
        root = etree.fromstring('<root xmlns:wp="urn:wp"><wp:docPr id="7"/></root>')
        allocator = IdAllocator.from_parts(etree.fromstring(RELS), [root])
        assert allocator.allocate_relationship_id() == "rId13"
        assert allocator.allocate_drawing_id() == 8


class TestSharedAllocation:
    """Tests for ids staying unique across managers."""

    def test_interleaved_managers_never_collide(self, wide_png):
        """Test that hyperlinks, images and headers draw from one counter."""
        doc = Document.create()
        para = doc.body.add_paragraph("Links: ")

        link_run = para.add_hyperlink("https://example.com", "one")
        image = para.add_image(wide_png)
        header = doc.get_header()
        second_link = para.add_hyperlink("https://example.org", "two")
        box = para.add_text_box(100, 40)

        rel_ids = [
            link_run.parent_node.get(r("id")),
            image.rel_id,
            header.rel_id,
            second_link.parent_node.get(r("id")),
        ]
        assert len(set(rel_ids)) == len(rel_ids)
        # A fresh package already uses rId1-rId4
        assert rel_ids[0] == "rId5"

        drawing_ids = [image.drawing_id, box.drawing_id]
        assert len(set(drawing_ids)) == 2

        all_ids = [rel.get("Id") for rel in doc.relationships.root]
        assert len(all_ids) == len(set(all_ids))

    def test_reopened_document_continues_numbering(self, tmp_path, wide_png):
        """Test that ids allocated after reopening do not reuse existing ones."""
        path = tmp_path / "ids.docx"
        doc = Document.create(path)
        para = doc.body.add_paragraph()
        first = para.add_image(wide_png)
        doc.save()

        reopened = Document.open(path)
        para = reopened.body.paragraphs().first()
        second = para.add_image(wide_png)
        assert second.rel_id != first.rel_id
        assert second.drawing_id > first.drawing_id
        assert para.current_node.findall(w("r"))[-1] is second.run.current_node

    def test_header_image_footer_image_ids_increase(self, wide_png):
        """Test that ids handed out across parts follow one increasing sequence."""
        doc = Document.create()
        para = doc.body.add_paragraph()

        header = doc.get_header()
        first_image = para.add_image(wide_png)
        footer = doc.get_footer()
        second_image = para.add_image(wide_png)

        rel_ids = [header.rel_id, first_image.rel_id, footer.rel_id, second_image.rel_id]
        numbers = [int(rel_id.removeprefix("rId")) for rel_id in rel_ids]
        assert numbers == sorted(numbers)
        assert len(set(numbers)) == 4
