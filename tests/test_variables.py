from mdjournal.variables import Variable, VariableMap


def test_default_value():
    assert Variable("a", default="x").default_value() == "x"
    assert Variable("a").default_value() is None


def test_map_sorted_iteration_and_replace():
    vmap = VariableMap()
    for key in ["b", "a", "c"]:
        vmap.insert(Variable(key))
    vmap.insert(Variable("a", required=True))
    assert [v.key for v in vmap] == ["a", "b", "c"]
    assert len(vmap) == 3
    assert vmap.get("a").required is True


def test_map_missing():
    assert VariableMap().get("x") is None
    assert len(VariableMap()) == 0