from shorthand.shorthand_datatypes import SourceMap, NOT_FOUND
from shorthand.shorthand_symbols import SymbolTable
from shorthand import VirtualMachine


def test_symbol_table_starts_empty():
    st = SymbolTable()
    assert st.entries == []
    assert st.labels == {}
    assert len(st) == 0


def test_get_missing_returns_sentinel():
    st = SymbolTable()
    sm = st.get("@missing")
    assert sm.line_no == -1
    assert sm.label == "" and sm.op == "" and sm.source == "" and sm.expanded == ""
    assert sm == NOT_FOUND


def test_set_then_get():
    vm = VirtualMachine()
    st = SymbolTable()
    sm1 = vm.parse("@now :=: This is now.", 1)
    i = st.set(sm1)
    assert i == 0
    sm2 = st.get("@now")
    assert sm2 == sm1
    assert "@now" in st


def test_last_write_wins_and_history_is_kept():
    st = SymbolTable()
    st.set(SourceMap(label="X", op=" :=: ", source="one", expanded="one", line_no=1))
    pos = st.set(SourceMap(label="X", op=" :=: ", source="two", expanded="two", line_no=2))
    assert pos == 1
    assert st.get("X").expanded == "two"
    assert len(st.entries) == 2
    assert st.entries[0].expanded == "one"
    assert len(st) == 1


def test_get_all_has_one_record_per_label():
    st = SymbolTable()
    st.set(SourceMap(label="P", expanded="1", line_no=1))
    st.set(SourceMap(label="Q", expanded="2", line_no=2))
    st.set(SourceMap(label="P", expanded="3", line_no=3))
    values = {(sm.label, sm.expanded) for sm in st.get_all()}
    assert values == {("P", "3"), ("Q", "2")}


def test_labels_point_at_their_own_entries():
    st = SymbolTable()
    for n, label in enumerate(["a", "b", "a", "c", "b"]):
        st.set(SourceMap(label=label, expanded=str(n), line_no=n))
    for label, i in st.labels.items():
        assert st.entries[i].label == label
