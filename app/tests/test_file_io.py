import pymupdf
import pytest
from PIL import Image

from planarea.file_io import load_page, load_plan, pdf_render_scale


@pytest.fixture
def two_page_pdf(tmp_path):
    path = tmp_path / "plan.pdf"
    doc = pymupdf.open()
    doc.new_page(width=200, height=100)
    doc.new_page(width=100, height=100)
    doc.save(str(path))
    doc.close()
    return str(path)


def test_pdf_render_scale():
    assert pdf_render_scale(200, 100) == 4.0
    assert pdf_render_scale(1100, 550) == 2.0
    assert pdf_render_scale(0, 100) == 1.0


def test_load_png(tmp_path):
    path = tmp_path / "room.png"
    Image.new('RGB', (40, 30), 'white').save(path)
    plan = load_plan(str(path))
    assert plan.image.size == (40, 30)
    assert plan.name == "room.png"
    assert not plan.is_pdf


def test_load_pdf_first_page(two_page_pdf):
    plan = load_plan(two_page_pdf)
    assert plan.is_pdf
    assert plan.page_count == 2
    assert plan.page_number == 1
    assert abs(plan.image.width - 800) <= 1
    assert abs(plan.image.height - 400) <= 1


def test_load_page_clamps_to_range(two_page_pdf):
    plan = load_plan(two_page_pdf)
    second = load_page(plan, 5)
    assert second.page_number == 2
    assert abs(second.image.width - 400) <= 1
    assert load_page(second, 0).page_number == 1


def test_load_page_needs_pdf(tmp_path):
    path = tmp_path / "room.png"
    Image.new('RGB', (4, 3)).save(path)
    with pytest.raises(ValueError):
        load_page(load_plan(str(path)), 2)


def test_garbage_pdf_raises_value_error(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"definitely not a pdf")
    with pytest.raises(ValueError):
        load_plan(str(path))


def test_non_image_raises_value_error(tmp_path):
    path = tmp_path / "notes.png"
    path.write_text("hello", encoding='utf-8')
    with pytest.raises(ValueError):
        load_plan(str(path))
