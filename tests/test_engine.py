import os
import sys
import pytest

# Add project root to sys.path to allow importing sassview
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sassview.engine import SassEngine, SassSyntaxError
from sassview.importers.views import ViewImporter
from sassview.lookup import FileSystemLookupContext
from sassview.models import ImportOptions

@pytest.fixture
def importer(tmp_path):
    # Setup:
    # /views
    #   stylesheets/
    #     application.css.scss   imports colors, admin/forms
    #     _colors.scss
    #     admin/
    #       _forms.scss          imports borders (relative to admin/)
    #       _borders.scss
    #     broken.scss
    sheets = tmp_path / "views" / "stylesheets"
    (sheets / "admin").mkdir(parents=True)
    (sheets / "application.css.scss").write_text(
        '@import "colors";\n@import "admin/forms";\nbody { color: $primary; }\n'
    )
    (sheets / "_colors.scss").write_text("$primary: #ff0000;\n")
    (sheets / "admin" / "_forms.scss").write_text('@import "borders";\nform { border: $border; }\n')
    (sheets / "admin" / "_borders.scss").write_text("$border: 1px solid;\n")
    (sheets / "broken.scss").write_text("body { color: $undefined; }\n")
    return ViewImporter(FileSystemLookupContext([tmp_path / "views"]))

def test_render_plain_source():
    css = SassEngine("$c: blue;\na { color: $c; }\n").render()
    assert "color: blue" in css

def test_render_indented_syntax():
    css = SassEngine("a\n  color: blue\n", ImportOptions(syntax="sass")).render()
    assert "color: blue" in css

def test_render_resolves_imports_through_views(importer):
    engine = importer.find("stylesheets/application")
    css = engine.render()

    assert "color: #ff0000" in css or "color: red" in css
    assert "border: 1px solid" in css

def test_render_output_style(importer):
    engine = importer.find("stylesheets/application", ImportOptions(style="compressed"))
    css = engine.render()

    assert "\n" not in css.strip()

def test_render_error_raises_syntax_error(importer):
    engine = importer.find("stylesheets/broken")

    with pytest.raises(SassSyntaxError) as excinfo:
        engine.render()
    assert excinfo.value.filename == "stylesheets/broken"

def test_unresolved_import_is_an_error(importer):
    engine = SassEngine('@import "nowhere";\n', ImportOptions(importer=importer, filename="stylesheets/x"))
    with pytest.raises(SassSyntaxError):
        engine.render()

def test_import_filename_carries_syntax(importer):
    engine = importer.find("colors", prefix="stylesheets")
    assert engine.filename == "stylesheets/_colors"
    assert engine.import_filename == "stylesheets/_colors.scss"
    assert SassEngine("").import_filename is None

def test_dependencies(importer):
    engine = importer.find("stylesheets/application")
    deps = engine.dependencies()

    assert [d.filename for d in deps] == ["stylesheets/_colors", "stylesheets/admin/_forms"]
    assert [d.filename for d in deps[1].dependencies()] == ["stylesheets/admin/_borders"]

def test_dependencies_without_importer():
    assert SassEngine('@import "colors";').dependencies() == []

def test_import_callback_falls_through_when_missing(importer):
    engine = importer.find("stylesheets/application")
    assert engine._import_callback("nowhere", "stdin") is None
    assert engine._import_callback("borders", "stylesheets/admin/_forms.scss") == [
        ("stylesheets/admin/_borders.scss", "$border: 1px solid;\n")
    ]
