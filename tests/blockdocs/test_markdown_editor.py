import pytest

from blockdocs.editor.markdown_editor import FORMAT_TYPES, TABLE_TEMPLATE, MarkdownSurface, Selection


class TestMarkdownSurface:

    @pytest.fixture
    def subject(self, store, clock) -> MarkdownSurface:
        surface = MarkdownSurface(3, "Hello world", store, history_delay=0.3, autosave_delay=1.5, scheduler=clock)
        surface.mount()
        yield surface
        surface.unmount()

    @pytest.mark.parametrize("fmt,expected", [
        ("bold", "**world**"),
        ("italic", "*world*"),
        ("code-inline", "`world`"),
        ("link", "[world](url)"),
        ("h1", "# world"),
        ("h2", "## world"),
        ("quote", "> world"),
        ("info-block", "> ℹ️ **Note:** world"),
        ("warning-block", "> ⚠️ **Warning:** world"),
        ("image", "![world](https://example.com/image.png)"),
    ])
    def test_wraps_selection(self, subject, fmt, expected):
        selection = subject.apply_format(fmt, Selection(6, 11))
        assert subject.text == f"Hello {expected}"
        assert subject.text[selection.start:selection.end] == expected

    @pytest.mark.parametrize("fmt,placeholder", [
        ("bold", "**bold text**"),
        ("italic", "*italic text*"),
        ("link", "[link text](url)"),
        ("list", "- item"),
        ("ordered-list", "1. item"),
        ("h2", "## Heading 2"),
    ])
    def test_placeholder_for_empty_selection(self, subject, fmt, placeholder):
        subject.apply_format(fmt, Selection.caret(0))
        assert subject.text == f"{placeholder}Hello world"

    def test_lists_prefix_every_line(self, store, clock):
        surface = MarkdownSurface(3, "one\ntwo\nthree", store, scheduler=clock)
        surface.apply_format("ordered-list", Selection(0, 13))
        assert surface.text == "1. one\n2. two\n3. three"
        surface.undo()
        surface.apply_format("list", Selection(0, 13))
        assert surface.text == "- one\n- two\n- three"

    def test_reversed_selection(self, subject):
        subject.apply_format("bold", Selection(11, 6))
        assert subject.text == "Hello **world**"

    def test_table_and_divider(self, subject):
        subject.apply_format("table", Selection.caret(11))
        assert subject.text.endswith(TABLE_TEMPLATE)
        subject.apply_format("divider", Selection.caret(0))
        assert subject.text.startswith("\n\n---\n\n")

    def test_every_format_is_known(self, subject):
        for fmt in FORMAT_TYPES:
            subject.apply_format(fmt, Selection.caret(0))
        with pytest.raises(ValueError):
            subject.apply_format("strike", Selection.caret(0))  # type: ignore[arg-type]

    def test_code_block(self, subject):
        subject.apply_code_block("python", Selection(0, 5))
        assert subject.text == "```python\nHello\n``` world"
        subject.undo()
        subject.apply_code_block("go", Selection.caret(0))
        assert subject.text.startswith("```go\n// code here\n```")

    def test_formatting_is_recorded_immediately(self, subject):
        subject.apply_format("bold", Selection(0, 5))
        subject.apply_format("italic", Selection(0, 0))
        assert len(subject.history) == 3
        subject.undo()
        assert subject.text == "**Hello** world"

    def test_typing_is_debounced(self, subject, clock):
        for text in ["Hello world!", "Hello world!!", "Hello world!!!"]:
            subject.on_input(text)
        clock.advance(0.3)
        assert len(subject.history) == 2
        subject.undo()
        assert subject.text == "Hello world"

    def test_same_text_is_not_a_change(self, subject):
        subject.on_input("Hello world")
        assert subject.unsaved is False

    def test_preview(self, subject):
        subject.on_input("# Title")
        subject.toggle_preview()
        assert subject.mode == "preview"
        assert "<h1>Title</h1>" in subject.preview_html()
        subject.set_mode("write")
        assert subject.mode == "write"

    @pytest.mark.asyncio
    async def test_autosave_persists_markdown(self, subject, store, clock):
        subject.on_input("Hello there")
        clock.advance(1.5)
        await subject.drain()
        assert store.calls_to("update_header") == [((3,), {"content": "Hello there"})]
        assert subject.unsaved is False
