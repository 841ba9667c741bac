from cad_engine import LayerManager


def test_default_layer_cannot_be_removed():
    layers = LayerManager()
    assert layers.get_all_layers() == ["0"]
    assert not layers.remove_layer("0")


def test_locked_layer_cannot_become_current():
    layers = LayerManager()
    layers.add_layer("Walls", locked=True)
    assert not layers.set_current_layer("Walls")
    assert layers.get_current_layer() == "0"

    layers.set_layer_locked("Walls", False)
    assert layers.set_current_layer("Walls")
    assert not layers.remove_layer("Walls")


def test_unknown_layers():
    layers = LayerManager()
    assert layers.is_layer_visible("Missing")
    assert not layers.is_layer_locked("Missing")
    assert layers.get_layer("Missing") is None
    assert not layers.add_layer("0")
