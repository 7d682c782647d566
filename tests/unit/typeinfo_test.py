"""Unit tests for resolving Go signatures against analyzed declarations."""

from stickyfields.core.gotypes import (
    ArrayType,
    BasicType,
    MapType,
    NamedType,
    OpaqueType,
    PointerType,
    Signature,
    SliceType,
    StructType,
)
from stickyfields.core.typeinfo import TypeInfo
from tests.helpers import BuildPackage

_TYPES = """
package orders

type Order struct {
    ID, Ref string
    Total   int
    note    string
}

type OrderDTO struct {
    ID    string
    Total int
}
"""


def _signature(go_package: BuildPackage, func_code: str) -> Signature:
    pkg = go_package(_TYPES + func_code)
    func = pkg.main.functions[-1]
    signature = pkg.info.signature(func)
    assert signature is not None
    return signature


class TestSignatures:
    def test_grouped_parameters_expand_in_order(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func Merge(a, b Order, n int) OrderDTO { return OrderDTO{} }")

        assert [v.name for v in signature.params] == ["a", "b", "n"]
        assert isinstance(signature.params[0].type, NamedType)
        assert signature.params[1].type == signature.params[0].type
        assert signature.params[2].type == BasicType("int")

    def test_single_unnamed_result(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func Convert(o Order) *OrderDTO { return nil }")

        assert len(signature.results) == 1
        assert signature.results[0].name == ""
        assert isinstance(signature.results[0].type, PointerType)

    def test_named_results(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func Convert(o Order) (out OrderDTO, err error) { return }")

        assert [v.name for v in signature.results] == ["out", "err"]
        assert signature.results[1].type == BasicType("error")

    def test_unnamed_result_list(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func Convert(o Order) (OrderDTO, error) { return OrderDTO{}, nil }")

        assert [v.name for v in signature.results] == ["", ""]

    def test_no_results(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func Consume(o Order) {}")
        assert signature.results == ()

    def test_variadic_parameter_is_slice(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func All(orders ...Order) []OrderDTO { return nil }")
        assert isinstance(signature.params[0].type, SliceType)

    def test_receiver(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func (o *Order) DTO() OrderDTO { return OrderDTO{} }")

        assert signature.receiver is not None
        assert signature.receiver.name == "o"
        assert signature.params == ()

    def test_containers(self, go_package: BuildPackage) -> None:
        signature = _signature(
            go_package,
            "func F(a [3]Order, m map[string]*Order, c chan Order, fn func() Order) {}",
        )
        a, m, c, fn = (v.type for v in signature.params)

        assert isinstance(a, ArrayType)
        assert a.length == "3"
        assert isinstance(m, MapType)
        assert m.key == BasicType("string")
        assert isinstance(m.value, PointerType)
        assert isinstance(c, OpaqueType)
        assert isinstance(fn, OpaqueType)

    def test_unknown_file_has_no_signature(self, go_package: BuildPackage) -> None:
        pkg = go_package(_TYPES + "func Convert(o Order) OrderDTO { return OrderDTO{} }")
        assert TypeInfo([]).signature(pkg.main.functions[0]) is None


class TestNamedTypes:
    def test_struct_fields_and_exported_names(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func F(o Order) {}")
        order = signature.params[0].type

        assert isinstance(order, NamedType)
        assert order.name == "Order"
        assert order.package == "orders"
        assert isinstance(order.underlying, StructType)
        assert order.underlying.exported_field_names() == ("ID", "Ref", "Total")

    def test_embedded_fields_use_type_name(self, go_package: BuildPackage) -> None:
        code = """
type Base struct{ Created string }

type Audited struct {
    Base
    *OrderDTO
    ext.Meta
    hidden
    Name string
}

func F(a Audited) {}
"""
        signature = _signature(go_package, code)
        audited = signature.params[0].type

        assert isinstance(audited, NamedType)
        assert isinstance(audited.underlying, StructType)
        assert audited.underlying.exported_field_names() == ("Base", "OrderDTO", "Meta", "Name")
        assert [f.embedded for f in audited.underlying.fields] == [True, True, True, True, False]

    def test_defined_type_takes_underlying_struct(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "type LegacyOrder Order\n\nfunc F(o LegacyOrder) {}")
        legacy = signature.params[0].type

        assert isinstance(legacy, NamedType)
        assert legacy.name == "LegacyOrder"
        assert isinstance(legacy.underlying, StructType)
        assert legacy.underlying.exported_field_names() == ("ID", "Ref", "Total")

    def test_alias_resolves_to_target(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "type View = OrderDTO\n\nfunc F(v View) {}")
        view = signature.params[0].type

        assert isinstance(view, NamedType)
        assert view.name == "OrderDTO"

    def test_non_struct_named_type(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "type IDs []string\n\nfunc F(ids IDs) {}")
        ids = signature.params[0].type

        assert isinstance(ids, NamedType)
        assert isinstance(ids.underlying, SliceType)

    def test_unknown_name_is_unresolved(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "func F(r Reader) {}")
        reader = signature.params[0].type

        assert isinstance(reader, NamedType)
        assert reader.underlying is None

    def test_cyclic_definitions_terminate(self, go_package: BuildPackage) -> None:
        signature = _signature(go_package, "type A B\n\ntype B A\n\nfunc F(a A) {}")
        a = signature.params[0].type

        assert isinstance(a, NamedType)
        assert not isinstance(a.underlying, StructType)


class TestImports:
    _MODEL = """
package model

type Sample struct {
    ID    string
    Label string
}
"""

    def test_qualified_type_resolves_by_import_path(self, go_package: BuildPackage) -> None:
        pkg = go_package(
            files={
                "converters/model/model.go": self._MODEL,
                "converters/c1/c1.go": """
package c1

import "converters/model"

func F(s model.Sample) {}
""",
            }
        )
        signature = pkg.info.signature(pkg.func("F"))
        assert signature is not None
        sample = signature.params[0].type

        assert isinstance(sample, NamedType)
        assert sample.package == "model"
        assert isinstance(sample.underlying, StructType)

    def test_aliased_import_falls_back_to_package_name(self, go_package: BuildPackage) -> None:
        pkg = go_package(
            files={
                "model/model.go": self._MODEL,
                "app/app.go": """
package app

import m "example.com/svc/model"

func F(s *m.Sample) {}
""",
            }
        )
        signature = pkg.info.signature(pkg.func("F"))
        assert signature is not None
        pointer = signature.params[0].type

        assert isinstance(pointer, PointerType)
        assert isinstance(pointer.elem, NamedType)
        assert isinstance(pointer.elem.underlying, StructType)

    def test_dot_import_resolves_unqualified_name(self, go_package: BuildPackage) -> None:
        pkg = go_package(
            files={
                "converters/model/model.go": self._MODEL,
                "converters/app/app.go": """
package app

import . "converters/model"

func F(s Sample) {}
""",
            }
        )
        signature = pkg.info.signature(pkg.func("F"))
        assert signature is not None
        sample = signature.params[0].type

        assert isinstance(sample, NamedType)
        assert isinstance(sample.underlying, StructType)

    def test_external_import_is_unresolved(self, go_package: BuildPackage) -> None:
        pkg = go_package("package app\n\nimport \"time\"\n\nfunc F(t time.Time) {}\n")
        signature = pkg.info.signature(pkg.func("F"))
        assert signature is not None
        t = signature.params[0].type

        assert isinstance(t, NamedType)
        assert t.package == "time"
        assert t.underlying is None
