"""
Test suite for the grammar elements.

Tests cover:
- match() as pure lookahead
- Ordered alternation and insertion
- Repetition and the dropping of empty results
- Token-class leaves, reserved words and keyword literals
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from stoneparse.lexer import Lexer, Token
from stoneparse.parser import (
    Parser, ParseError, ASTLeaf, ASTList, Name, NumberLiteral, StringLiteral,
    KeywordLiteral, Emit, Alternation, match_element, parse_element
)


class Label(ASTLeaf):
    pass


class Block(ASTList):
    pass


class TestMatchIsLookahead(unittest.TestCase):
    """match() never consumes input."""

    def _rule(self):
        item = Parser.rule().identifier({"}"}).sep("=").number()
        return Parser.rule().sep("{").repeat(Parser.rule().ast(item).sep(";")).sep("}")

    def test_repeated_match_then_parse(self):
        source = "{ a = 1; b = 2; }"
        rule = self._rule()

        lexer = Lexer(source)
        for _ in range(5):
            self.assertTrue(rule.match(lexer))
        self.assertEqual(lexer.peek(0).text, "{")
        after_match = rule.parse(lexer)

        direct = rule.parse(Lexer(source))
        self.assertEqual(str(after_match), str(direct))
        self.assertEqual(str(direct), "((a 1) (b 2))")

    def test_failed_match_consumes_nothing(self):
        lexer = Lexer("42")

        self.assertFalse(self._rule().match(lexer))
        self.assertEqual(lexer.peek(0).number, 42)


class TestAlternation(unittest.TestCase):
    """Ordered choice between rules."""

    def test_first_matching_candidate_wins(self):
        as_name = Parser.rule().identifier(shape=Name)
        as_label = Parser.rule().identifier(shape=Label)
        rule = Parser.rule().or_(Parser.rule().number(), as_name, as_label)

        node = rule.parse(Lexer("x"))
        self.assertIsInstance(node, Name)

    def test_insert_takes_priority(self):
        as_name = Parser.rule().identifier(shape=Name)
        rule = Parser.rule().or_(as_name)
        alternation = rule.elements[0]
        self.assertIsInstance(alternation, Alternation)

        alternation.insert(Parser.rule().identifier(shape=Label))

        self.assertIsInstance(rule.parse(Lexer("x")), Label)
        self.assertEqual(len(alternation.parsers), 2)

    def test_no_candidate_raises_unexpected_token(self):
        rule = Parser.rule().or_(Parser.rule().number(), Parser.rule().string())
        lexer = Lexer("\nfoo")
        lexer.read()

        self.assertFalse(rule.match(lexer))
        with self.assertRaises(ParseError) as ctx:
            rule.parse(lexer)

        self.assertEqual(ctx.exception.code, "P001")
        self.assertEqual(ctx.exception.line, 2)
        self.assertIn('"foo" at line 2', ctx.exception.message)


class TestRepetition(unittest.TestCase):
    """Repetition loops while its rule matches."""

    def test_zero_or_more(self):
        rule = Parser.rule().repeat(Parser.rule().number())

        self.assertEqual(str(rule.parse(Lexer("1 2 3"))), "(1 2 3)")

    def test_zero_iterations_gives_empty_list(self):
        rule = Parser.rule().repeat(Parser.rule().number())
        lexer = Lexer("x")

        node = rule.parse(lexer)
        self.assertIs(type(node), ASTList)
        self.assertEqual(node.num_children(), 0)
        self.assertEqual(lexer.peek(0).text, "x")

    def test_zero_or_one(self):
        rule = Parser.rule().option(Parser.rule().number())
        lexer = Lexer("1 2")

        node = rule.parse(lexer)
        self.assertEqual(str(node), "1")
        self.assertEqual(lexer.peek(0).number, 2)

    def test_empty_results_are_dropped(self):
        """Items that parse to an empty plain list never reach the output."""
        item = Parser.rule().sep(",").option(Parser.rule().number())
        rule = Parser.rule().repeat(item)

        node = rule.parse(Lexer(", 1 , , 2 ,"))
        self.assertEqual(str(node), "(1 2)")
        for child in node.children():
            self.assertFalse(type(child) is ASTList and child.num_children() == 0)

    def test_only_separators_leave_nothing(self):
        rule = Parser.rule().number().repeat(Parser.rule().sep(Token.EOL))

        node = rule.parse(Lexer("5\n\n\n"))
        self.assertIsInstance(node, ASTLeaf)
        self.assertEqual(str(node), "5")

    def test_empty_custom_shapes_are_kept(self):
        rule = Parser.rule().repeat(Parser.rule(Block).sep(","))

        node = rule.parse(Lexer(", ,"))
        self.assertEqual(node.num_children(), 2)
        self.assertIsInstance(node.child(0), Block)


class TestTokenLeaves(unittest.TestCase):
    """Identifier, number and string leaves."""

    def test_leaf_shapes(self):
        rule = Parser.rule().number(NumberLiteral).identifier(shape=Name).string(StringLiteral)

        node = rule.parse(Lexer('4 x "s"'))
        self.assertIsInstance(node.child(0), NumberLiteral)
        self.assertIsInstance(node.child(1), Name)
        self.assertIsInstance(node.child(2), StringLiteral)
        self.assertEqual(node.child(2).value(), "s")

    def test_default_leaf_shape(self):
        node = Parser.rule().number().parse(Lexer("4"))
        self.assertIs(type(node), ASTLeaf)

    def test_reserved_words_do_not_match(self):
        reserved = {"if"}
        rule = Parser.rule().identifier(reserved)

        self.assertFalse(rule.match(Lexer("if")))
        self.assertTrue(rule.match(Lexer("while")))

        # The set is consulted at parse time
        reserved.add("while")
        self.assertFalse(rule.match(Lexer("while")))

    def test_reserved_word_at_parse_time_raises(self):
        rule = Parser.rule().identifier({";"})

        with self.assertRaises(ParseError) as ctx:
            rule.parse(Lexer(";"))
        self.assertEqual(ctx.exception.code, "P001")

    def test_operators_are_identifiers(self):
        self.assertTrue(Parser.rule().identifier().match(Lexer("+")))

    def test_number_where_identifier_expected(self):
        """The error carries the line of the offending token."""
        skip_lines = Parser.rule().sep(Token.EOL)
        rule = Parser.rule().repeat(skip_lines).identifier().sep("=").identifier()

        with self.assertRaises(ParseError) as ctx:
            rule.parse(Lexer("\n\nx = 42"))

        error = ctx.exception
        self.assertEqual(error.line, 3)
        self.assertEqual(error.token.number, 42)
        self.assertIn("Unexpected token", error.message)
        self.assertIn("<unknown>:3:5", str(error))


class TestKeywordLiterals(unittest.TestCase):
    """token() keeps its match, sep() discards it."""

    def test_discard_consumes_without_output(self):
        lexer = Lexer("; x")
        res = []
        element = KeywordLiteral((";",), Emit.DISCARD)

        self.assertTrue(match_element(element, lexer))
        parse_element(element, lexer, res)

        self.assertEqual(res, [])
        self.assertEqual(lexer.peek(0).text, "x")

    def test_keep_emits_plain_leaf(self):
        lexer = Lexer("; x")
        res = []

        parse_element(KeywordLiteral((";",), Emit.KEEP), lexer, res)

        self.assertEqual(len(res), 1)
        self.assertIs(type(res[0]), ASTLeaf)
        self.assertEqual(str(res[0]), ";")

    def test_any_candidate_matches(self):
        rule = Parser.rule().token("+", "-")

        self.assertEqual(str(rule.parse(Lexer("-"))), "-")
        self.assertTrue(rule.match(Lexer("+")))
        self.assertFalse(rule.match(Lexer("*")))

    def test_keywords_match_identifier_shaped_tokens_only(self):
        self.assertFalse(Parser.rule().token("if").match(Lexer('"if"')))

    def test_expected_error_names_first_candidate(self):
        with self.assertRaises(ParseError) as ctx:
            Parser.rule().sep(")", "]").parse(Lexer("x"))

        self.assertEqual(ctx.exception.code, "P002")
        self.assertTrue(ctx.exception.message.startswith('")" expected'))

    def test_no_candidates_raises_unexpected_token(self):
        with self.assertRaises(ParseError) as ctx:
            Parser.rule().token().parse(Lexer("x"))

        self.assertEqual(ctx.exception.code, "P001")

    def test_end_of_input_in_message(self):
        with self.assertRaises(ParseError) as ctx:
            Parser.rule().sep(";").parse(Lexer(""))

        self.assertIn("end of input", ctx.exception.message)


if __name__ == '__main__':
    unittest.main()
