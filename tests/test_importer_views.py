import os
import sys
from datetime import datetime
from unittest.mock import MagicMock, call

import pytest

# Add project root to sys.path to allow importing sassview
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sassview.engine import SassEngine
from sassview.handlers import SassTemplateHandler, TemplateHandler
from sassview.importers.views import ViewImporter
from sassview.lookup import FileSystemLookupContext
from sassview.models import ImportOptions, Template

def make_template(virtual_path, handler, source="a { b: c; }", updated_at=None):
    return Template(
        identifier=f"/views/{virtual_path}",
        virtual_path=virtual_path,
        source=source,
        handler=handler,
        updated_at=updated_at or datetime(2024, 1, 1, 12, 0, 0),
    )

@pytest.fixture
def lookup():
    return MagicMock()

def test_find_prefers_non_partial(lookup):
    main = make_template("stylesheets/colors", SassTemplateHandler("scss"), "$a: 1;")
    lookup.find_all.return_value = [main]

    engine = ViewImporter(lookup).find("colors")

    assert engine.source == "$a: 1;"
    lookup.find_all.assert_called_once_with("colors", None, False)

def test_find_falls_back_on_partial(lookup):
    partial = make_template("stylesheets/_colors", SassTemplateHandler("scss"))
    lookup.find_all.side_effect = lambda name, prefix, is_partial: [partial] if is_partial else []

    engine = ViewImporter(lookup).find("colors", prefix="stylesheets")

    assert engine.filename == "stylesheets/_colors"
    assert lookup.find_all.call_args_list == [
        call("colors", "stylesheets", False),
        call("colors", "stylesheets", True),
    ]

def test_non_sass_candidates_are_skipped(lookup):
    css = make_template("stylesheets/colors", TemplateHandler("css"))
    partial = make_template("stylesheets/_colors", SassTemplateHandler("sass"))
    lookup.find_all.side_effect = lambda name, prefix, is_partial: [partial] if is_partial else [css]

    engine = ViewImporter(lookup).find("colors")

    assert engine.filename == "stylesheets/_colors"
    assert engine.syntax == "sass"

def test_first_sass_candidate_wins(lookup):
    first = make_template("a/colors", SassTemplateHandler("scss"), "first")
    second = make_template("b/colors", SassTemplateHandler("sass"), "second")
    lookup.find_all.return_value = [make_template("x", TemplateHandler("erb")), first, second]

    assert ViewImporter(lookup).find("colors").source == "first"

def test_not_found_returns_none(lookup):
    lookup.find_all.return_value = []
    importer = ViewImporter(lookup)

    assert importer.find("missing") is None
    assert importer.find_relative("missing", "stylesheets/application") is None
    assert importer.mtime("missing") is None

def test_find_relative_uses_base_directory_as_prefix(lookup):
    lookup.find_all.return_value = []
    ViewImporter(lookup).find_relative("forms", "stylesheets/admin/application")

    assert lookup.find_all.call_args_list[0] == call("forms", "stylesheets/admin", False)

def test_find_relative_single_segment_base(lookup):
    lookup.find_all.return_value = []
    ViewImporter(lookup).find_relative("forms", "application")

    assert lookup.find_all.call_args_list[0] == call("forms", "", False)

def test_options_are_derived_not_mutated(lookup):
    template = make_template("stylesheets/_colors", SassTemplateHandler("sass"))
    lookup.find_all.return_value = [template]
    base = ImportOptions(style="compressed", load_paths=["vendor"], filename="stylesheets/application")

    importer = ViewImporter(lookup)
    engine = importer.find("colors", base)

    assert isinstance(engine, SassEngine)
    assert engine.options.syntax == "sass"
    assert engine.options.filename == "stylesheets/_colors"
    assert engine.options.importer is importer
    assert engine.options.style == "compressed"
    assert engine.options.load_paths == ["vendor"]

    # Caller's options untouched
    assert base.syntax == "scss"
    assert base.filename == "stylesheets/application"
    assert base.importer is None

def test_mtime_truncates_to_seconds(lookup):
    updated = datetime(2024, 3, 1, 8, 30, 15, 900000)
    lookup.find_all.return_value = [make_template("colors", SassTemplateHandler("scss"), updated_at=updated)]

    mtime = ViewImporter(lookup).mtime("colors")

    assert mtime == int(updated.timestamp())
    assert isinstance(mtime, int)

def test_mtime_looks_up_without_prefix(lookup):
    partial = make_template("_colors", SassTemplateHandler("scss"))
    lookup.find_all.side_effect = lambda name, prefix, is_partial: [partial] if is_partial else []

    assert ViewImporter(lookup).mtime("colors") is not None
    assert lookup.find_all.call_args_list == [call("colors", None, False), call("colors", None, True)]

def test_str_label(lookup):
    assert str(ViewImporter(lookup)) == "(view importer)"

def test_against_view_directory(tmp_path):
    sheets = tmp_path / "stylesheets"
    (sheets / "admin").mkdir(parents=True)
    (sheets / "application.css.scss").write_text("@import 'admin/forms';\n")
    (sheets / "admin" / "_forms.scss").write_text("form { padding: 0; }\n")
    (sheets / "admin" / "forms.css").write_text("form {}\n")
    os.utime(sheets / "admin" / "_forms.scss", (1700000000, 1700000000))

    importer = ViewImporter(FileSystemLookupContext([tmp_path]))

    app = importer.find("stylesheets/application")
    assert app.filename == "stylesheets/application"

    forms = importer.find_relative("admin/forms", app.filename)
    assert forms.filename == "stylesheets/admin/_forms"
    assert forms.source == "form { padding: 0; }\n"
    assert importer.mtime("stylesheets/admin/forms") == 1700000000
