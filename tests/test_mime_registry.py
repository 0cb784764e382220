from xml.etree import ElementTree

from desksetup.desktop.mime_registry import MimeRegistry, MimeTypeDefinition, render_mime_package
from tests.conftest import FakeShellExecutor

NS = {'m': "http://www.freedesktop.org/standards/shared-mime-info"}


def test_render_package_is_valid_xml():
    definitions = [
        MimeTypeDefinition("model/stl", "STL 3D Model", globs=["*.stl", "*.STL"], icon="model-stl",
                           magic_string="solid", localized=True),
        MimeTypeDefinition("application/sla", "SLA <3D> & Model", globs=["*.stl"]),
    ]

    text = render_mime_package(definitions)

    assert text.startswith('<?xml version="1.0"?>\n')
    root = ElementTree.fromstring(text)
    types = root.findall('m:mime-type', NS)
    assert [t.get('type') for t in types] == ["model/stl", "application/sla"]

    stl = types[0]
    assert [g.get('pattern') for g in stl.findall('m:glob', NS)] == ["*.stl", "*.STL"]
    match = stl.find('m:magic/m:match', NS)
    assert match.get('value') == "solid"
    assert match.get('offset') == "0"
    assert stl.find('m:magic', NS).get('priority') == "50"
    assert stl.find('m:icon', NS).get('name') == "model-stl"
    assert len(stl.findall('m:comment', NS)) == 2

    assert types[1].find('m:comment', NS).text == "SLA <3D> & Model"
    assert types[1].find('m:magic', NS) is None


def test_write_package_and_update(tmp_path):
    executor = FakeShellExecutor()
    registry = MimeRegistry(executor, tmp_path / "mime")

    path = registry.write_package("ultimaker-cura", [MimeTypeDefinition("application/sla", "STL file", ["*.stl"])])
    registry.update_database()

    assert path == tmp_path / "mime/packages/ultimaker-cura.xml"
    assert 'type="application/sla"' in path.read_text()
    assert executor.commands() == [['update-mime-database', str(tmp_path / "mime")]]


def test_set_default_and_verify(tmp_path):
    executor = FakeShellExecutor()
    executor.script(['xdg-mime', 'query', 'default', 'application/sla'], stdout="Ultimaker-Cura.desktop\n")
    executor.script(['xdg-mime', 'query', 'default', 'application/vnd.ms-pki.stl'], stdout="other.desktop\n")
    registry = MimeRegistry(executor, tmp_path)

    registry.set_default("Ultimaker-Cura.desktop", ["application/sla", "application/vnd.ms-pki.stl"])

    assert ['xdg-mime', 'default', 'Ultimaker-Cura.desktop', 'application/sla'] in executor.commands()
    assert registry.query_default("application/sla") == "Ultimaker-Cura.desktop"
    assert registry.verify_defaults("Ultimaker-Cura.desktop", ["application/sla"])
    assert not registry.verify_defaults("Ultimaker-Cura.desktop", ["application/sla", "application/vnd.ms-pki.stl"])
