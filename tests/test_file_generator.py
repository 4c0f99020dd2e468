import pytest
from google.protobuf.descriptor import FieldDescriptor

from protoc_php import defaults
from protoc_php.generator.php_file_generator import PhpFileGenerator, generate_file
from protoc_php.models import GenerationError, GeneratorOptions
from protoc_php.naming import PhpNaming
from proto_factory import F, demo_file, load, make_enum, make_field, make_file, make_message, make_service

NAMESPACES = GeneratorOptions(use_namespaces=True)


def _positions(content, needles):
    return [content.index(n) for n in needles]


class TestDemoScenario:
    @pytest.fixture(scope="class")
    def content(self):
        result = generate_file(demo_file(), NAMESPACES)
        assert result.ok
        return result.content

    def test_header(self, content):
        assert content.startswith("<?php\n")
        assert "//   require('protocolbuffers.inc.php');\n" in content
        assert "//   require('demo.php');\n" in content

    def test_namespace_block(self, content):
        assert "\nnamespace Demo {\n  use Protobuf;\n  use ProtobufEnum;\n  use ProtobufMessage;\n" in content
        assert content.endswith("\n}\n")

    def test_dependency_is_required_inside_namespace(self, content):
        assert "\n  require('base.php');\n" in content

    def test_enum(self, content):
        assert "  class Color extends ProtobufEnum {\n" in content
        assert "    const RED = 0;\n    const GREEN = 1;\n" in content
        assert '      0 => "RED",\n' in content

    def test_message_defaults(self, content):
        assert "  class Point extends ProtobufMessage {\n" in content
        assert "    // optional int32 x = 1 [default = 0];\n" in content
        assert "public function getX() { if ($this->x === null) return 0; return $this->x; }" in content
        assert "public function getY() { if ($this->y === null) return 0; return $this->y; }" in content
        assert "public function setX($value) { $this->x = $value; }" in content

    def test_phase_order(self, content):
        positions = _positions(content, [
            "<?php",
            "namespace Demo {",
            "require('base.php');",
            "class Color extends ProtobufEnum",
            "class Point extends ProtobufMessage",
        ])
        assert positions == sorted(positions)
        assert content.rindex("}") > positions[-1]


class TestNamespaceGating:
    def test_disabled_by_option(self):
        content = generate_file(demo_file(), GeneratorOptions(use_namespaces=False)).content
        assert "namespace" not in content
        assert "use Protobuf;" not in content
        assert "\nrequire('base.php');\n" in content
        assert "\nclass Point extends ProtobufMessage {\n" in content

    def test_no_package_means_no_namespace(self):
        file = load(make_file("loose.proto", messages=[make_message("Loose")]))
        content = generate_file(file, NAMESPACES).content
        assert "namespace" not in content
        assert "\nclass Loose extends ProtobufMessage {\n" in content

    def test_package_less_import_is_referenced_from_the_global_namespace(self):
        loose = make_file("loose.proto", messages=[make_message("Loose")])
        holder = make_file("holder.proto", package="demo", dependencies=["loose.proto"], messages=[
            make_message("Holder", [make_field("l", 1, F.TYPE_MESSAGE, type_name=".Loose")]),
        ])
        content = generate_file(load(loose, holder), NAMESPACES).content
        assert "public function setL(\\Loose $value) { $this->l = $value; }" in content
        assert "\\Demo\\Loose" not in content


class TestOrdering:
    @pytest.fixture(scope="class")
    def file(self):
        deps = [make_file(name, package="dep") for name in ("z.proto", "a.proto", "m.proto")]
        main = make_file(
            "order.proto",
            package="order",
            dependencies=["z.proto", "a.proto", "m.proto"],
            enums=[make_enum("Zeta", [("Z0", 0)]), make_enum("Alpha", [("A0", 0)])],
            messages=[
                make_message("Second", nested=[make_message("Inner")], enums=[make_enum("Mode", [("M0", 0)])]),
                make_message("First"),
            ],
            services=[
                make_service("ZService", [("Ping", ".order.First", ".order.Second")]),
                make_service("AService", [("Pong", ".order.Second", ".order.First")]),
            ],
        )
        return load(*deps, main)

    def test_declaration_order_is_kept(self, file):
        content = generate_file(file).content
        positions = _positions(content, [
            "require('z.php');",
            "require('a.php');",
            "require('m.php');",
            "class Zeta extends",
            "class Alpha extends",
            "class Second_Mode extends",
            "class Second extends",
            "class Second_Inner extends",
            "class First extends",
            "interface ZService",
            "interface AService",
        ])
        assert positions == sorted(positions)

    def test_duplicate_dependencies_are_not_merged(self):
        base = make_file("base.proto", package="base")
        main = make_file("dup.proto", dependencies=["base.proto"])
        generator = PhpFileGenerator(load(base, main))
        # A descriptor pool refuses duplicate imports, so add the second one here.
        generator.file_proto.dependency.append("base.proto")
        content = generator.generate().content
        assert content.count("require('base.php');") == 2

    def test_output_is_deterministic(self, file):
        first = generate_file(file, NAMESPACES).content
        second = generate_file(file, NAMESPACES).content
        assert first == second


class TestMessageBody:
    @pytest.fixture(scope="class")
    def content(self):
        file = load(make_file("shop.proto", package="shop", messages=[
            make_message("Item"),
            make_message("Order", [
                make_field("id", 1, F.TYPE_UINT64),
                make_field("items", 2, F.TYPE_MESSAGE, label=F.LABEL_REPEATED, type_name=".shop.Item"),
                make_field("card", 3, F.TYPE_STRING, oneof_index=0),
                make_field("voucher", 4, F.TYPE_MESSAGE, type_name=".shop.Item", oneof_index=0),
                make_field("class", 5, F.TYPE_BOOL, default="true"),
            ], oneofs=["payment"]),
        ]))
        return generate_file(file, NAMESPACES).content

    def test_oneof_constants_and_slots(self, content):
        assert "const NONE = 0;" in content
        assert "const CARD = 1;" in content
        assert "const VOUCHER = 2;" in content
        assert "private $_paymentcase = self::NONE;" in content
        assert "private $payment = null;" in content
        assert "public function getPaymentCase() { return $this->_paymentcase; }" in content

    def test_oneof_members_share_the_oneof_slot(self, content):
        assert ("public function setCard($value) { $this->_paymentcase = self::CARD; "
                "$this->payment = $value; }") in content
        assert ("public function setVoucher(\\Shop\\Item $value) { $this->_paymentcase = self::VOUCHER; "
                "$this->payment = $value; }") in content
        assert 'if ($this->_paymentcase === self::CARD) return $this->payment; return "";' in content
        assert "private $card" not in content

    def test_repeated_accessors(self, content):
        assert "public function addItems(\\Shop\\Item $value) { $this->items[] = $value; }" in content
        assert "public function getItemsCount()" in content
        assert "public function getItemsArray()" in content

    def test_reserved_field_name(self, content):
        assert "private $class_ = null;" in content
        assert "public function getClass() { if ($this->class_ === null) return true; return $this->class_; }" in content


class TestServices:
    def test_interface_methods(self):
        file = load(make_file("greet.proto", package="greet", messages=[
            make_message("HelloRequest"), make_message("HelloReply"),
        ], services=[
            make_service("Greeter", [("SayHello", ".greet.HelloRequest", ".greet.HelloReply")]),
        ]))
        content = generate_file(file, NAMESPACES).content
        assert "  interface Greeter {\n" in content
        assert "// rpc SayHello(greet.HelloRequest) returns (greet.HelloReply)" in content
        assert "public function sayHello(\\Greet\\HelloRequest $request);" in content

    def test_reserved_service_name(self):
        file = load(make_file("list.proto", package="svc", messages=[make_message("Query")], services=[
            make_service("List", [("Fetch", ".svc.Query", ".svc.Query")]),
        ]))
        content = generate_file(file, NAMESPACES).content
        assert "  interface List_ {\n" in content
        assert "interface List {" not in content


class TestProto3Optional:
    @pytest.fixture(scope="class")
    def content(self):
        file = load(make_file("stock.proto", package="stock", syntax="proto3", messages=[
            make_message("Stock", [
                make_field("sku", 1, F.TYPE_STRING, oneof_index=0),
                make_field("count", 2, proto3_optional=True, oneof_index=1),
            ], oneofs=["kind", "_count"]),
        ]))
        result = generate_file(file, NAMESPACES)
        assert result.ok
        return result.content

    def test_optional_field_is_a_plain_field(self, content):
        assert content.count("public function clearCount()") == 1
        assert "public function clearCount() { $this->count = null; }" in content
        assert "public function getCount() { if ($this->count === null) return 0; return $this->count; }" in content
        assert "private $count = null;" in content

    def test_wrapper_oneof_is_not_emitted(self, content):
        assert "_countcase" not in content
        assert "const COUNT" not in content
        assert "$this->clearCount();" not in content

    def test_real_oneof_is_kept(self, content):
        assert "const NONE = 0;" in content
        assert "const SKU = 1;" in content
        assert "private $_kindcase = self::NONE;" in content
        assert "public function clearKind()" in content


class BrokenNaming(PhpNaming):
    def namespace_name(self, file):
        raise GenerationError("no namespace for you")


class TestErrors:
    def test_generation_error_becomes_result(self):
        result = generate_file(demo_file(), NAMESPACES, naming=BrokenNaming(use_namespaces=True))
        assert not result.ok
        assert result.content is None
        assert result.error == "no namespace for you"

    def test_internal_fault_is_not_swallowed(self, monkeypatch):
        monkeypatch.delitem(defaults.FORMATTERS, FieldDescriptor.CPPTYPE_INT32)
        with pytest.raises(AssertionError):
            generate_file(demo_file())

    def test_oneof_member_named_none_is_a_generation_error(self):
        file = load(make_file("pick.proto", messages=[
            make_message("Pick", [make_field("none", 1, oneof_index=0), make_field("some", 2, oneof_index=0)],
                         oneofs=["choice"]),
        ]))
        result = generate_file(file)
        assert not result.ok
        assert "NONE" in result.error
