"""
Tests for Element resolution, event hooks and dynamic member lookup.
"""

import pytest

from fakes import FakeNode
from pagewright import (
    Element,
    ElementType,
    NotSupportedError,
    Page,
    ResolutionError,
    UndefinedSelectorError,
    UnsupportedCriteriaError,
    after_events,
    before_events,
    button,
    element,
    section,
    text_field,
)
from pagewright.drivers import AmbiguousMatchError, ElementNotFoundError


class SearchPage(Page):
    url = "/search"

    query = text_field(name="q")
    go = button(text="Search")
    heading = element(text="Results")
    rows = element(css="tr", options={"multiple_results": True})

    @section(css="#results")
    def results(results):
        results.element("first", css="li")


def tracked(log):
    """Element class whose hooks append to log."""

    class TrackedButton(Element):
        @before_events
        def announce(self):
            log.append(("before", self.name))

        @after_events
        def confirm(self):
            log.append(("after", self.name))

    return TrackedButton


@pytest.fixture
def page(session):
    return SearchPage(session)


@pytest.fixture
def query_node(driver):
    return driver.add("name", "q", FakeNode("q", verbs=("set",), value=""))


class TestResolution:
    """Tests for binding elements to browser nodes."""

    def test_resolves_against_parent(self, page, driver, query_node):
        assert page.query.browser_element is query_node
        assert driver.lookups == [("name", "q", {})]

    def test_resolves_once(self, page, driver, query_node):
        """The bound node is memoized for the element's lifetime."""
        page.query.browser_element
        page.query.browser_element
        assert len(driver.lookups) == 1

    def test_new_instance_resolves_again(self, session, driver, query_node):
        SearchPage(session).query.browser_element
        SearchPage(session).query.browser_element
        assert len(driver.lookups) == 2

    def test_nested_lookup_is_scoped(self, page, driver):
        """Sub-elements are looked up inside their parent's node."""
        first = FakeNode("first")
        results = driver.add("css", "#results", FakeNode("results", children={("css", "li"): first}))

        assert page.results.first.browser_element is first
        assert results.lookups == [("css", "li", {})]
        assert driver.lookups == [("css", "#results", {})]

    def test_options_reach_the_driver(self, page, driver):
        node = driver.add("css", "p", FakeNode("p"))
        page.element("para", css="p", visible=True)

        assert page.para.browser_element is node
        assert driver.lookups == [("css", "p", {"visible": True})]

    def test_multiple_results(self, page, driver):
        rows = [FakeNode("row1"), FakeNode("row2")]
        driver.add("css", "tr", rows)
        assert page.rows.browser_element == rows

    def test_not_found_propagates(self, page):
        with pytest.raises(ElementNotFoundError):
            page.query.browser_element

    def test_ambiguous_propagates(self, page, driver):
        driver.add("name", "q", [FakeNode("a"), FakeNode("b")])
        with pytest.raises(AmbiguousMatchError):
            page.query.browser_element

    def test_undefined_selector(self, page):
        orphan = Element("orphan", page)
        with pytest.raises(UndefinedSelectorError):
            orphan.browser_element

    def test_undefined_selector_before_parent(self):
        """An empty selector fails even without a parent chain."""
        with pytest.raises(UndefinedSelectorError):
            Element("orphan").browser_element

    def test_unsupported_criteria_does_not_contact_driver(self, page, driver):
        with pytest.raises(UnsupportedCriteriaError):
            page.heading.browser_element
        assert driver.lookups == []

    def test_prefetched_node(self, driver):
        node = FakeNode("given")
        prefetched = Element("given", None, prefetched_browser_element=node)

        assert prefetched.browser_element is node
        assert driver.lookups == []

    def test_prefetched_in_declaration(self, page, driver):
        node = FakeNode("given")
        page.element("given", node)
        assert page.given.browser_element is node

    def test_no_parent(self):
        with pytest.raises(ResolutionError):
            Element("lonely", selector={"css": "p"}).browser_element

    def test_page_without_session(self):
        with pytest.raises(ResolutionError):
            SearchPage().query.browser_element

    def test_class_selector_default(self, page, driver):
        class Banner(Element):
            selector = {"css": ".banner"}

        node = driver.add("css", ".banner", FakeNode("banner"))
        assert Banner("banner", page).browser_element is node


class TestEventHooks:
    """Tests for before/after hooks around interaction verbs."""

    def test_hooks_wrap_verbs(self, page, driver):
        log = []
        node = driver.add("css", "#go", FakeNode("go", click=lambda: log.append("click") or "clicked"))
        go = tracked(log)("go", page, element_type=ElementType.BUTTON, selector={"css": "#go"})

        assert go.click() == "clicked"
        assert log == [("before", "go"), "click", ("after", "go")]

    def test_bound_node_is_wrapped(self, page, driver):
        """Calling the verb on the node itself also runs the hooks."""
        log = []
        driver.add("css", "#go", FakeNode("go", click=lambda: log.append("click")))
        go = tracked(log)("go", page, selector={"css": "#go"})

        go.browser_element.click()
        assert log == [("before", "go"), "click", ("after", "go")]

    def test_arguments_pass_through(self, page, driver, query_node):
        page.query.set("pagewright")
        assert query_node.calls == [("set", ("pagewright",), {})]

    def test_only_supported_verbs_are_wrapped(self, page, driver, query_node):
        page.query.browser_element
        assert not hasattr(query_node, "click")

    def test_unsupported_verb(self, page, driver, query_node):
        with pytest.raises(NotSupportedError, match="click not supported by this element"):
            page.query.click()

    def test_hooks_accumulate_down_the_hierarchy(self):
        log = []
        Parent = tracked(log)

        class Child(Parent):
            @before_events
            def prepare(self):
                log.append("child")

        assert [hook.__name__ for hook in Child.before_events()] == ["announce", "prepare"]
        assert [hook.__name__ for hook in Parent.before_events()] == ["announce"]
        assert [hook.__name__ for hook in Child.after_events()] == ["confirm"]

    def test_ancestor_hooks_run_first(self, page, driver):
        log = []

        class Child(tracked(log)):
            @before_events
            def prepare(self):
                log.append("child")

        driver.add("css", "#go", FakeNode("go", click=lambda: log.append("click")))
        Child("go", page, selector={"css": "#go"}).click()

        assert log == [("before", "go"), "child", "click", ("after", "go")]

    def test_class_level_registration(self, page, driver):
        log = []

        class Plain(Element):
            pass

        Plain.after_events(lambda el: log.append(("after", el.name)))
        driver.add("css", "#go", FakeNode("go", verbs=("click",)))
        Plain("go", page, selector={"css": "#go"}).click()

        assert log == [("after", "go")]
        assert Element.after_events() == []

    def test_instance_level_registration(self, page, driver):
        """Hooks added to an instance stay on that instance."""
        log = []
        driver.add("css", "#go", FakeNode("go", verbs=("click",)))

        page.go.before_events(lambda el: log.append("instance"))
        page.go.click()

        assert log == ["instance"]
        assert SearchPage(page.session).go.before_events() == []

    def test_hooks_added_after_binding_run(self, page, driver):
        log = []
        driver.add("css", "#go", FakeNode("go", verbs=("click",)))
        page.go.browser_element
        page.go.after_events(lambda el: log.append("late"))

        page.go.click()
        assert log == ["late"]

    def test_prefetched_nodes_are_wrapped(self, page):
        log = []
        node = FakeNode("given", click=lambda: log.append("click"))
        hooked = tracked(log)("given", page, prefetched_browser_element=node)

        node_click = hooked.browser_element.click
        node_click()
        assert log == [("before", "given"), "click", ("after", "given")]

    def test_shared_prefetched_node_is_wrapped_once(self, session):
        """A node bound by many elements runs each interaction's hooks once."""
        log = []
        node = FakeNode("item", click=lambda: log.append("click"))

        class ItemPage(Page):
            item = element(tracked(log), "item", node)

        for _ in range(3):
            del log[:]
            ItemPage(session).item.click()
            assert log == [("before", "item"), "click", ("after", "item")]

        del log[:]
        node.click()
        assert log == [("before", "item"), "click", ("after", "item")]

    def test_element_runs_its_own_hooks_on_a_shared_node(self, session):
        log = []
        node = FakeNode("item", verbs=("click",))

        class ItemPage(Page):
            item = element("item", node)

        first, second = ItemPage(session), ItemPage(session)
        first.item.before_events(lambda el: log.append("first"))
        second.item.before_events(lambda el: log.append("second"))
        first.item.browser_element
        second.item.browser_element

        first.item.click()
        assert log == ["first"]
        assert node.calls == [("click", (), {})]

    def test_multiple_results_are_wrapped(self, page, driver):
        log = []
        rows = [FakeNode("row1", verbs=("click",)), FakeNode("row2", verbs=("click",))]
        driver.add("css", "tr", rows)
        page.rows.after_events(lambda el: log.append("after"))

        page.rows.browser_element[1].click()
        assert log == ["after"]
        assert rows[1].calls == [("click", (), {})]


class TestClassWatch:
    """Tests for watchers declared on element classes."""

    def test_snapshot_before_each_event(self, page, driver):
        class Counter(Element):
            pass

        node = FakeNode("counter", text="1")
        node.click = lambda: setattr(node, "text", str(int(node.text) + 1))
        driver.add("css", "#counter", node)
        Counter.watch("text")

        counter = Counter("counter", page, selector={"css": "#counter"})
        counter.click()

        assert counter.watcher("text").last == "1"
        assert counter.changed("text")

        counter.click()
        assert counter.watcher("text").last == "2"


class TestDynamicMembers:
    """Tests for sub-element and node attribute lookup."""

    def test_node_attributes(self, page, query_node):
        assert page.query.value == ""

    def test_sub_elements_before_node_attributes(self, page, driver):
        first_node = FakeNode("first")
        driver.add("css", "#results", FakeNode("results", children={("css", "li"): first_node}, first="node"))

        assert isinstance(page.results.first, Element)

    def test_missing_member_is_attribute_error(self, page, query_node):
        with pytest.raises(AttributeError):
            page.query.nothing_here

    def test_hasattr(self, page, query_node):
        assert hasattr(page.query, "value")
        assert hasattr(page.query, "click")
        assert not hasattr(page.query, "nothing_here")

    def test_hasattr_sub_element(self, page, driver):
        driver.add("css", "#results", FakeNode("results"))
        assert hasattr(page.results, "first")

    def test_private_names_are_not_delegated(self, page, query_node):
        query_node._secret = 1
        with pytest.raises(AttributeError):
            page.query._secret


class TestElementBasics:
    """Tests for equality, sections and session delegators."""

    def test_equality(self):
        first = Element("a", None, selector={"css": ".a"})
        second = Element("a", None, selector={"css": ".a"})
        assert first == second

    def test_inequality(self):
        base = Element("a", None, selector={"css": ".a"})
        assert base != Element("b", None, selector={"css": ".a"})
        assert base != Element("a", None, selector={"css": ".b"})
        assert base != Element("a", None, element_type=ElementType.LINK, selector={"css": ".a"})

    def test_hooks_break_equality(self):
        first = Element("a", None, selector={"css": ".a"})
        second = Element("a", None, selector={"css": ".a"})
        second.before_events(lambda el: None)
        assert first != second

    def test_same_definition_on_two_pages(self, session):
        assert SearchPage(session).query == SearchPage(session).query

    def test_is_section(self, page):
        assert page.results.is_section()
        assert not page.query.is_section()

    def test_helper_makes_a_section(self, page):
        page.query.define_method(lambda self: "clear", "clear")
        assert page.query.is_section()
        assert page.query.clear() == "clear"

    def test_expand_returns_self(self, page):
        assert page.query.expand(lambda el, name: el.element(name, css=".x"), "extra") is page.query
        assert "extra" in page.query.element_definitions()

    def test_session_delegators(self, session, driver):
        session.define_page_mappings({"/search": SearchPage})
        session.visit(SearchPage)
        query = session.current_page().query

        assert query.session is session
        assert query.url == "http://example.com/search"
        assert query.path == "/search"
        assert query.page is session.current_page()
        assert query.retry_config is session.retry_config

    def test_detached_delegators(self):
        detached = Element("a", selector={"css": ".a"})
        assert detached.session is None
        with pytest.raises(ResolutionError):
            detached.url

    def test_repr(self):
        assert repr(Element("a", selector={"css": ".a"})) == "<Element element 'a' {'css': '.a'}>"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
