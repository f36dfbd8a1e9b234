"""
Test suite for the CMakeLists.txt editor.

This module tests the pure text transforms including:
- Target block detection
- Merging sources into existing targets
- Appending new targets
- C++ standard upserts
- Standard settings bundle
- Sub-project inclusion and link statements
"""

import unittest

DOCUMENT = """cmake_minimum_required(VERSION 3.10)
project(demo)

set(CMAKE_CXX_STANDARD 14)
set(CMAKE_CXX_STANDARD_REQUIRED ON)

add_executable(app
    main.cpp
)

# Trailing comment kept verbatim
"""


class TestTargetDetection(unittest.TestCase):
    """Test finding add_executable blocks."""

    def test_find_existing_block(self):
        """Test that a block in the emitted shape is found with its entries."""
        from qs.project.editor import find_target_block

        block = find_target_block(DOCUMENT, "app")

        self.assertIsNotNone(block)
        self.assertEqual(block.entries, ["main.cpp"])
        self.assertEqual(DOCUMENT[block.start : block.end], "    main.cpp\n")

    def test_name_must_match_exactly(self):
        """Test that a target name is not matched as a prefix of another."""
        from qs.project.editor import find_target_block, has_target

        content = "add_executable(app2\n    main.cpp\n)\n"

        self.assertFalse(has_target(content, "app"))
        self.assertIsNone(find_target_block(content, "app"))
        self.assertTrue(has_target(content, "app2"))

    def test_name_is_not_a_regex(self):
        """Test that regex metacharacters in names are matched literally."""
        from qs.project.editor import has_target

        content = "add_executable(a.b\n    main.cpp\n)\n"

        self.assertTrue(has_target(content, "a.b"))
        self.assertFalse(has_target(content, "a*b"))

    def test_blank_entries_are_discarded(self):
        """Test that whitespace-only lines inside a block are ignored."""
        from qs.project.editor import find_target_block

        content = "add_executable(app\n    a.cpp\n\n      b.cpp   \n)\n"
        block = find_target_block(content, "app")

        self.assertEqual(block.entries, ["a.cpp", "b.cpp"])

    def test_single_line_declaration_is_not_mergeable(self):
        """Test that a hand-written one-line declaration is not detected as a block."""
        from qs.project.editor import find_target_block, has_target

        content = "add_executable(app main.cpp)\n"

        self.assertTrue(has_target(content, "app"))
        self.assertIsNone(find_target_block(content, "app"))

    def test_block_stops_at_its_own_closing_paren(self):
        """Test that a trailing `)` on an entry line does not reach into the next statement."""
        from qs.project.editor import find_target_block

        content = "add_executable(app\n    main.cpp)\n\nadd_executable(other\n    other.cpp\n)\n"

        self.assertIsNone(find_target_block(content, "app"))
        self.assertIsNotNone(find_target_block(content, "other"))

    def test_later_declaration_is_not_used(self):
        """Test that only the first declaration of a name is considered."""
        from qs.project.editor import find_target_block

        content = "add_executable(app main.cpp)\n\nadd_executable(app\n    b.cpp\n)\n"

        self.assertIsNone(find_target_block(content, "app"))


class TestAddTargetSources(unittest.TestCase):
    """Test merge-or-append of target sources."""

    def test_merge_into_existing_target(self):
        """Test that new sources are appended after existing ones."""
        from qs.project.editor import MERGED, add_target_sources

        result = add_target_sources(DOCUMENT, "app", ["utils.cpp"])

        self.assertEqual(result.action, MERGED)
        self.assertEqual(result.added, ["utils.cpp"])
        self.assertIn("add_executable(app\n    main.cpp\n    utils.cpp\n)\n", result.content)
        self.assertEqual(result.content.count("add_executable(app"), 1)

    def test_merge_union_keeps_order(self):
        """Test that re-adding a target lists each source exactly once, in order."""
        from qs.project.editor import add_target_sources

        content = add_target_sources("project(x)\n", "t", ["a.cpp"]).content
        content = add_target_sources(content, "t", ["a.cpp", "b.cpp"]).content

        self.assertEqual(content.count("add_executable(t"), 1)
        self.assertIn("add_executable(t\n    a.cpp\n    b.cpp\n)\n", content)

    def test_unrelated_text_is_preserved(self):
        """Test that text outside the edited block is untouched."""
        from qs.project.editor import add_target_sources

        result = add_target_sources(DOCUMENT, "app", ["utils.cpp"])

        before, _, after = DOCUMENT.partition("add_executable(app\n")
        self.assertTrue(result.content.startswith(before))
        self.assertTrue(result.content.endswith(")\n\n# Trailing comment kept verbatim\n"))

    def test_nothing_new_is_unchanged(self):
        """Test that adding only known sources leaves the document as is."""
        from qs.project.editor import UNCHANGED, add_target_sources

        result = add_target_sources(DOCUMENT, "app", ["main.cpp"])

        self.assertEqual(result.action, UNCHANGED)
        self.assertFalse(result.changed)
        self.assertEqual(result.content, DOCUMENT)

    def test_append_new_target(self):
        """Test that an unknown target is appended as a new block."""
        from qs.project.editor import APPENDED, add_target_sources

        result = add_target_sources(DOCUMENT, "tool", ["tool.cpp", "tool.h"])

        self.assertEqual(result.action, APPENDED)
        self.assertTrue(
            result.content.endswith("\nadd_executable(tool\n    tool.cpp\n    tool.h\n)\n")
        )
        self.assertTrue(result.content.startswith(DOCUMENT))

    def test_backslashes_are_normalized(self):
        """Test that Windows-style separators become forward slashes."""
        from qs.project.editor import add_target_sources

        result = add_target_sources(DOCUMENT, "tool", ["src\\tool.cpp"])

        self.assertIn("    src/tool.cpp\n", result.content)
        self.assertNotIn("\\", result.content)

    def test_normalized_duplicates_are_skipped(self):
        """Test that a backslash path equal to an existing entry is not re-added."""
        from qs.project.editor import UNCHANGED, add_target_sources

        content = "add_executable(app\n    src/main.cpp\n)\n"
        result = add_target_sources(content, "app", ["src\\main.cpp", "src/main.cpp"])

        self.assertEqual(result.action, UNCHANGED)

    def test_first_matching_block_wins(self):
        """Test that only the first of duplicate declarations is edited."""
        from qs.project.editor import add_target_sources, find_duplicate_targets

        content = "add_executable(app\n    a.cpp\n)\n\nadd_executable(app\n    b.cpp\n)\n"
        result = add_target_sources(content, "app", ["c.cpp"])

        self.assertEqual(find_duplicate_targets(content), ["app"])
        self.assertEqual(
            result.content,
            "add_executable(app\n    a.cpp\n    c.cpp\n)\n\nadd_executable(app\n    b.cpp\n)\n",
        )

    def test_single_line_declaration_gets_duplicate_block(self):
        """Test the append fallback for declarations in an unrecognized shape."""
        from qs.project.editor import APPENDED, add_target_sources

        content = "add_executable(app main.cpp)\n"
        result = add_target_sources(content, "app", ["utils.cpp"])

        self.assertEqual(result.action, APPENDED)
        self.assertEqual(result.content.count("add_executable(app"), 2)

    def test_hand_formatted_block_leaves_next_statement_alone(self):
        """Test that a hand-formatted block followed by another target appends a new block."""
        from qs.project.editor import APPENDED, add_target_sources

        content = (
            "add_executable(app\n    main.cpp)\n\n"
            "add_executable(other\n    other.cpp\n)\n"
        )
        result = add_target_sources(content, "app", ["util.cpp"])

        self.assertEqual(result.action, APPENDED)
        self.assertEqual(
            result.content,
            content + "\nadd_executable(app\n    util.cpp\n)\n",
        )


class TestCxxStandard(unittest.TestCase):
    """Test the singleton C++ standard setting."""

    def test_replace_existing_value(self):
        """Test that an existing standard line is rewritten in place."""
        from qs.project.editor import REPLACED, find_cxx_standard, upsert_cxx_standard

        result = upsert_cxx_standard(DOCUMENT, 17)

        self.assertEqual(result.action, REPLACED)
        self.assertEqual(find_cxx_standard(result.content), 17)
        self.assertEqual(result.content.count("set(CMAKE_CXX_STANDARD "), 1)
        self.assertEqual(result.content, DOCUMENT.replace("STANDARD 14)", "STANDARD 17)"))

    def test_append_when_missing(self):
        """Test that a missing standard is appended with its REQUIRED companion."""
        from qs.project.editor import APPENDED, upsert_cxx_standard

        result = upsert_cxx_standard("project(x)\n", 20)

        self.assertEqual(result.action, APPENDED)
        self.assertEqual(
            result.content,
            "project(x)\n\n# C++ Standard\nset(CMAKE_CXX_STANDARD 20)\n"
            "set(CMAKE_CXX_STANDARD_REQUIRED ON)\n",
        )

    def test_same_value_is_unchanged(self):
        from qs.project.editor import UNCHANGED, upsert_cxx_standard

        result = upsert_cxx_standard(DOCUMENT, 14)

        self.assertEqual(result.action, UNCHANGED)
        self.assertEqual(result.content, DOCUMENT)


class TestStandardSettings(unittest.TestCase):
    """Test the standard settings bundle."""

    def test_bundle_is_appended_once(self):
        """Test that applying the bundle twice yields the same document."""
        from qs.project.editor import UNCHANGED, add_standard_settings

        first = add_standard_settings(DOCUMENT)
        second = add_standard_settings(first.content)

        self.assertTrue(first.changed)
        self.assertEqual(second.action, UNCHANGED)
        self.assertEqual(second.content, first.content)
        self.assertEqual(first.content.count("CMAKE_RUNTIME_OUTPUT_DIRECTORY"), 1)
        self.assertIn("enable_testing()", first.content)
        self.assertIn("include_directories(${CMAKE_CURRENT_SOURCE_DIR}/include)", first.content)

    def test_install_rule_names_executables(self):
        from qs.project.editor import add_standard_settings

        content = DOCUMENT + "\nadd_executable(tool\n    tool.cpp\n)\n"
        result = add_standard_settings(content)

        self.assertIn("install(TARGETS app tool DESTINATION bin)", result.content)

    def test_install_rule_without_targets(self):
        from qs.project.editor import add_standard_settings

        result = add_standard_settings("project(x)\n")

        self.assertIn("# No targets found to install", result.content)
        self.assertNotIn("install(TARGETS", result.content)

    def test_any_marker_counts_as_present(self):
        """Test that a single marker statement suppresses the whole bundle."""
        from qs.project.editor import UNCHANGED, add_standard_settings

        content = "set(CMAKE_ARCHIVE_OUTPUT_DIRECTORY ${CMAKE_BINARY_DIR}/lib)\n"

        self.assertEqual(add_standard_settings(content).action, UNCHANGED)


class TestSubprojectStatements(unittest.TestCase):
    """Test idempotent add_subdirectory and target_link_libraries."""

    def test_subdirectory_added_once(self):
        from qs.project.editor import UNCHANGED, ensure_subdirectory

        first = ensure_subdirectory(DOCUMENT, "core")
        second = ensure_subdirectory(first.content, "core")

        self.assertTrue(first.content.endswith("\n# Sub-project core\nadd_subdirectory(core)\n"))
        self.assertEqual(second.action, UNCHANGED)
        self.assertEqual(second.content.count("add_subdirectory(core)"), 1)

    def test_link_added_once(self):
        from qs.project.editor import UNCHANGED, ensure_link

        first = ensure_link(DOCUMENT, "app", "core")
        second = ensure_link(first.content, "app", "core")

        self.assertIn("target_link_libraries(app PRIVATE core)\n", first.content)
        self.assertEqual(second.action, UNCHANGED)
        self.assertEqual(second.content.count("target_link_libraries("), 1)

    def test_other_subdirectory_does_not_count(self):
        from qs.project.editor import ensure_subdirectory

        content = "add_subdirectory(core2)\n"
        result = ensure_subdirectory(content, "core")

        self.assertTrue(result.changed)


class TestQueries(unittest.TestCase):
    """Test the read-only document queries."""

    def test_queries(self):
        from qs.project import editor

        content = (
            DOCUMENT
            + "add_library(core STATIC core.cpp)\n"
            + "add_subdirectory(core)\n"
        )

        self.assertEqual(editor.find_project_name(content), "demo")
        self.assertEqual(editor.find_cxx_standard(content), 14)
        self.assertEqual(editor.find_executable_targets(content), ["app"])
        self.assertEqual(editor.find_library_targets(content), ["core"])
        self.assertEqual(editor.find_subdirectories(content), ["core"])
        self.assertEqual(editor.find_duplicate_targets(content), [])

    def test_queries_on_empty_document(self):
        from qs.project import editor

        self.assertIsNone(editor.find_project_name(""))
        self.assertIsNone(editor.find_cxx_standard(""))
        self.assertEqual(editor.find_executable_targets(""), [])


if __name__ == "__main__":
    unittest.main()
