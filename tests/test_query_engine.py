import unittest

from table_query.query.filters import Condition, Operator
from table_query.search.engine import QueryEngine
from table_query.utils.errors import InvalidConditionError, QueryError

from sample_data import sample_records


class TestQueryEngineSetup(unittest.TestCase):

    def test_default_values(self):
        engine = QueryEngine()
        self.assertEqual(engine.objects, [])
        self.assertEqual(engine.primary_key_field, 'id')

    def test_provided_data_and_primary_key(self):
        data = [{'customId': 1, 'name': 'test'}]
        engine = QueryEngine(data, 'customId')
        self.assertIs(engine.objects, data)
        self.assertEqual(engine.primary_key_field, 'customId')
        self.assertEqual(engine.filter_objects(''), [1])

    def test_set_objects_replaces_reference(self):
        engine = QueryEngine(sample_records())
        new_data = [{'id': 99, 'name': 'New User'}]
        engine.set_objects(new_data)
        self.assertIs(engine.objects, new_data)
        self.assertEqual(engine.filter_objects('new'), [99])


class TestSearchObjects(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine(sample_records(), 'id')

    def test_empty_search_returns_all(self):
        self.assertEqual(self.engine.search_objects(''), [1, 2, 3, 4, 5])
        self.assertEqual(self.engine.search_objects('   '), [1, 2, 3, 4, 5])

    def test_single_term(self):
        self.assertEqual(self.engine.search_objects('john'), [1, 3])

    def test_all_terms_must_match(self):
        self.assertEqual(self.engine.search_objects('john active'), [1, 3])
        self.assertEqual(self.engine.search_objects('john pending'), [])

    def test_case_insensitive(self):
        self.assertEqual(self.engine.search_objects('JANE'), [2])

    def test_no_matches(self):
        self.assertEqual(self.engine.search_objects('nonexistent'), [])

    def test_array_and_number_values_are_searched(self):
        self.assertEqual(self.engine.search_objects('designer'), [2])
        self.assertEqual(self.engine.search_objects('developer,lead'), [1])
        self.assertEqual(self.engine.search_objects('35'), [3])

    def test_null_contributes_nothing(self):
        self.assertEqual(self.engine.search_objects('none'), [])

    def test_empty_string_field_is_searchable_text(self):
        engine = QueryEngine([{'id': 1, 'note': ''}, {'id': 2, 'note': 'urgent'}])
        self.assertEqual(engine.search_objects('urgent'), [2])


class TestParseCondition(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine(sample_records())

    def test_equality(self):
        self.assertEqual(self.engine.parse_condition('name = "John Doe"'),
                         Condition('name', '=', 'John Doe'))

    def test_comparison_operators(self):
        self.assertEqual(self.engine.parse_condition('age != 30'), Condition('age', '!=', 30))
        self.assertEqual(self.engine.parse_condition('age > 25'), Condition('age', '>', 25))
        self.assertEqual(self.engine.parse_condition('age < 35'), Condition('age', '<', 35))
        self.assertEqual(self.engine.parse_condition('age>25').operator, Operator.GT)

    def test_in_list(self):
        self.assertEqual(self.engine.parse_condition('status IN ["active", "pending"]'),
                         Condition('status', 'IN', ['active', 'pending']))

    def test_in_list_with_null(self):
        self.assertEqual(self.engine.parse_condition('age IN ["30", NULL]'),
                         Condition('age', 'IN', ['30', None]))

    def test_value_coercion(self):
        self.assertIs(self.engine.parse_condition('active = true').value, True)
        self.assertIs(self.engine.parse_condition('active = FALSE').value, False)
        self.assertIsNone(self.engine.parse_condition('age = NULL').value)
        self.assertEqual(self.engine.parse_condition('score = 95.5').value, 95.5)
        self.assertEqual(self.engine.parse_condition('code = abc').value, 'abc')
        self.assertEqual(self.engine.parse_condition('code = "42"').value, '42')

    def test_invalid_condition(self):
        with self.assertRaises(InvalidConditionError) as ctx:
            self.engine.parse_condition('invalid condition format')
        self.assertEqual(str(ctx.exception), 'Invalid condition: invalid condition format')

    def test_greater_equal_is_not_an_operator(self):
        # ">" is matched and "= 30" becomes the value text
        condition = self.engine.parse_condition('age >= 30')
        self.assertEqual(condition.operator, '>')
        self.assertEqual(condition.value, '= 30')


class TestApplyCondition(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine()
        self.record = {'id': 1, 'name': 'John', 'age': 30, 'status': 'active',
                       'tags': ['dev', 'lead'], 'score': None, 'note': ''}

    def check(self, field, operator, value):
        return self.engine.apply_condition(self.record, Condition(field, operator, value))

    def test_equality(self):
        self.assertTrue(self.check('name', '=', 'John'))
        self.assertFalse(self.check('name', '=', 'Jane'))

    def test_equality_with_null(self):
        self.assertTrue(self.check('score', '=', None))
        self.assertTrue(self.check('note', '=', None))
        self.assertTrue(self.check('missing', '=', None))
        self.assertFalse(self.check('name', '=', None))
        self.assertFalse(self.check('score', '=', 'John'))

    def test_equality_with_array_fields(self):
        self.assertTrue(self.check('tags', '=', 'dev'))
        self.assertFalse(self.check('tags', '=', 'designer'))

    def test_equality_is_loose_for_scalars(self):
        self.assertTrue(self.check('age', '=', '30'))
        self.assertTrue(self.engine.apply_condition({'age': '30'}, Condition('age', '=', 30)))
        self.assertTrue(self.engine.apply_condition({'flag': True}, Condition('flag', '=', 1)))
        self.assertFalse(self.check('age', '=', 'thirty'))

    def test_inequality(self):
        self.assertTrue(self.check('name', '!=', 'Jane'))
        self.assertFalse(self.check('name', '!=', 'John'))

    def test_inequality_with_null(self):
        self.assertFalse(self.check('score', '!=', None))
        self.assertTrue(self.check('name', '!=', None))
        self.assertTrue(self.check('score', '!=', 'anything'))

    def test_inequality_with_array_fields(self):
        self.assertTrue(self.check('tags', '!=', 'designer'))
        self.assertFalse(self.check('tags', '!=', 'dev'))

    def test_greater_and_less_than(self):
        self.assertTrue(self.check('age', '>', 25))
        self.assertFalse(self.check('age', '>', 35))
        self.assertTrue(self.check('age', '<', 35))
        self.assertFalse(self.check('age', '<', 25))

    def test_ordering_with_numeric_prefix_and_strings(self):
        self.assertTrue(self.check('age', '>', '29abc'))
        self.assertTrue(self.engine.apply_condition({'age': '30'}, Condition('age', '>', 29)))
        self.assertFalse(self.check('name', '>', 1))
        self.assertFalse(self.check('age', '>', True))

    def test_ordering_with_null_values(self):
        self.assertFalse(self.check('score', '>', 0))
        self.assertFalse(self.check('score', '<', 100))
        self.assertFalse(self.check('missing', '<', 100))

    def test_ordering_with_array_fields_is_unsupported(self):
        self.assertFalse(self.check('tags', '>', 1))
        self.assertFalse(self.check('tags', '<', 5))

    def test_in(self):
        self.assertTrue(self.check('status', 'IN', ['active', 'pending']))
        self.assertFalse(self.check('status', 'IN', ['inactive', 'pending']))

    def test_in_with_null_in_list(self):
        self.assertTrue(self.check('score', 'IN', ['active', None]))
        self.assertTrue(self.check('status', 'IN', ['active', None]))
        self.assertFalse(self.check('name', 'IN', ['Jane', None]))

    def test_in_with_null_record_value(self):
        self.assertFalse(self.check('score', 'IN', ['active', 'pending']))

    def test_in_with_array_fields(self):
        self.assertTrue(self.check('tags', 'IN', ['dev', 'designer']))
        self.assertFalse(self.check('tags', 'IN', ['manager', 'designer']))

    def test_in_membership_is_strict(self):
        self.assertFalse(self.check('age', 'IN', ['30']))

    def test_unknown_operator(self):
        self.assertFalse(self.check('name', 'UNKNOWN', 'John'))


class TestProcessGroup(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine()
        self.record = {'id': 1, 'name': 'John', 'age': 30, 'status': 'active'}

    def test_single_condition(self):
        self.assertTrue(self.engine.process_group(self.record, 'name = "John"'))

    def test_and(self):
        self.assertTrue(self.engine.process_group(self.record, 'name = "John" AND age = 30'))
        self.assertFalse(self.engine.process_group(self.record, 'name = "John" AND age = 25'))

    def test_or(self):
        self.assertTrue(self.engine.process_group(self.record, 'name = "Jane" OR age = 30'))
        self.assertFalse(self.engine.process_group(self.record, 'name = "Jane" OR age = 25'))

    def test_and_binds_tighter_than_or(self):
        self.assertTrue(self.engine.process_group(
            self.record, 'name = "Jane" OR age = 30 AND status = "active"'))
        self.assertFalse(self.engine.process_group(
            self.record, 'name = "Jane" OR age = 30 AND status = "inactive"'))

    def test_boolean_literals(self):
        self.assertTrue(self.engine.process_group(self.record, 'true'))
        self.assertFalse(self.engine.process_group(self.record, 'false'))
        self.assertTrue(self.engine.process_group(self.record, 'TRUE AND name = "John"'))

    def test_invalid_condition(self):
        with self.assertRaises(InvalidConditionError) as ctx:
            self.engine.process_group(self.record, 'invalid condition')
        self.assertEqual(str(ctx.exception), 'Invalid condition: invalid condition')


class TestEvaluateExpression(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine()
        self.record = {'id': 1, 'name': 'John', 'age': 30, 'status': 'active'}

    def test_empty_expression(self):
        self.assertTrue(self.engine.evaluate_expression(self.record, ''))
        self.assertTrue(self.engine.evaluate_expression(self.record, '   '))

    def test_simple_expression(self):
        self.assertTrue(self.engine.evaluate_expression(self.record, 'name = "John"'))
        self.assertFalse(self.engine.evaluate_expression(self.record, 'name = "Jane"'))

    def test_parentheses(self):
        self.assertTrue(self.engine.evaluate_expression(
            self.record, '(name = "John" OR name = "Jane") AND age = 30'))
        self.assertFalse(self.engine.evaluate_expression(
            self.record, 'name = "Jane" AND (age = 30 OR status = "active")'))

    def test_nested_parentheses(self):
        self.assertTrue(self.engine.evaluate_expression(
            self.record, '((name = "John" AND age = 30) OR status = "inactive")'))

    def test_whitespace_is_normalized(self):
        self.assertTrue(self.engine.evaluate_expression(
            self.record, 'name   =  "John"\n\tAND   age = 30'))


class TestFilterObjects(unittest.TestCase):

    def setUp(self):
        self.engine = QueryEngine(sample_records(), 'id')

    def test_empty_query_returns_all(self):
        self.assertEqual(self.engine.filter_objects(''), [1, 2, 3, 4, 5])
        self.assertEqual(self.engine.filter_objects('  \t'), [1, 2, 3, 4, 5])

    def test_search_mode(self):
        self.assertEqual(self.engine.filter_objects('john'), [1, 3])
        for text in ('doe', 'lead active', 'ali'):
            self.assertEqual(self.engine.filter_objects(text), self.engine.search_objects(text))

    def test_structured_query(self):
        self.assertEqual(self.engine.filter_objects('status = "active"'), [1, 3, 5])

    def test_complex_query(self):
        self.assertEqual(self.engine.filter_objects('status = "active" AND age > 29'), [1, 3])

    def test_in_query(self):
        self.assertEqual(self.engine.filter_objects('status IN ["active", "pending"]'), [1, 3, 4, 5])

    def test_null_query(self):
        self.assertEqual(self.engine.filter_objects('age = NULL'), [5])

    def test_null_matches_missing_and_empty(self):
        engine = QueryEngine([{'id': 1, 'age': 30}, {'id': 2, 'age': None}, {'id': 3}, {'id': 4, 'age': ''}])
        self.assertEqual(engine.filter_objects('age = NULL'), [2, 3, 4])
        self.assertEqual(engine.filter_objects('age != NULL'), [1])

    def test_array_membership(self):
        self.assertEqual(self.engine.filter_objects('tags = "lead"'), [1, 3])
        self.assertEqual(self.engine.filter_objects('tags != "lead"'), [2, 4, 5])
        self.assertEqual(self.engine.filter_objects('tags IN ["designer", "manager"]'), [2, 3])
        self.assertEqual(self.engine.filter_objects('tags > 0'), [])

    def test_grouped_query(self):
        self.assertEqual(
            self.engine.filter_objects('(status = "pending" OR status = "inactive") AND age < 28'), [2])

    def test_invalid_query_raises(self):
        with self.assertRaises(QueryError) as ctx:
            self.engine.filter_objects('field AND')
        self.assertEqual(str(ctx.exception), 'Query error: Invalid condition: field AND')
        self.assertIsInstance(ctx.exception.cause, InvalidConditionError)
        self.assertIsInstance(ctx.exception.__cause__, InvalidConditionError)

    def test_unbalanced_parentheses_raise(self):
        with self.assertRaises(QueryError):
            self.engine.filter_objects('(status = "active"')
        with self.assertRaises(QueryError):
            self.engine.filter_objects('status = "active")')

    def test_unreached_invalid_conjunct_does_not_raise(self):
        self.assertEqual(self.engine.filter_objects('age = 99 AND garbage here'), [])
        self.assertEqual(self.engine.filter_objects('true OR nonsense'), [1, 2, 3, 4, 5])

    def test_invalid_group_raises_despite_short_circuit(self):
        for query in ('true OR (bogus)', 'false AND (bogus)', 'true OR false AND (bogus)'):
            with self.assertRaises(QueryError) as ctx:
                self.engine.filter_objects(query)
            self.assertEqual(str(ctx.exception), 'Query error: Invalid condition: bogus', query)

    def test_groups_are_evaluated_innermost_first(self):
        # Both groups are innermost; the left one fails first
        with self.assertRaises(QueryError) as ctx:
            self.engine.filter_objects('(id = 1 AND (first bad)) OR (second bad)')
        self.assertEqual(str(ctx.exception), 'Query error: Invalid condition: first bad')

        # The inner group is evaluated before the outer group's own conjuncts
        with self.assertRaises(QueryError) as ctx:
            self.engine.filter_objects('(outer bad AND (id = 1)) OR (inner bad)')
        self.assertEqual(str(ctx.exception), 'Query error: Invalid condition: inner bad')

    def test_invalid_conjunct_inside_group_keeps_short_circuit(self):
        self.assertEqual(self.engine.filter_objects('(id > 0 OR garbage) AND age > 29'), [1, 3])

    def test_search_large_numbers_in_exponent_form(self):
        engine = QueryEngine([{'id': 1, 'size': 1e21}, {'id': 2, 'size': 1e20}])
        self.assertEqual(engine.search_objects('1e+21'), [1])
        self.assertEqual(engine.search_objects('100000000000000000000'), [2])

    def test_dotted_field_names_are_invalid(self):
        # Conditions must match as a whole; a dotted path is not read as its last part
        with self.assertRaises(QueryError) as ctx:
            self.engine.filter_objects('user.name = "x"')
        self.assertEqual(str(ctx.exception), 'Query error: Invalid condition: user.name = "x"')
        self.assertEqual(QueryEngine([{'id': 1, 'name': 'x'}]).filter_objects('name = "x"'), [1])

    def test_invalid_query_on_empty_collection(self):
        self.assertEqual(QueryEngine([]).filter_objects('field AND'), [])

    def test_search_text_with_operator_characters_is_structured(self):
        # Read as the condition a < b, not as search text
        self.assertEqual(self.engine.filter_objects('a<b'), [])
        with self.assertRaises(QueryError):
            self.engine.filter_objects('john (doe)')

    def test_quoted_keywords_are_values(self):
        engine = QueryEngine([{'id': 1, 'name': 'Smith AND Sons'}, {'id': 2, 'name': 'Acme (UK)'}])
        self.assertEqual(engine.filter_objects('name = "Smith AND Sons"'), [1])
        self.assertEqual(engine.filter_objects('name = "Acme (UK)"'), [2])

    def test_missing_primary_key_is_returned_as_none(self):
        engine = QueryEngine([{'id': 1, 'x': 1}, {'x': 1}])
        self.assertEqual(engine.filter_objects('x = 1'), [1, None])

    def test_idempotent(self):
        query = 'status = "active" AND (age > 29 OR age = NULL)'
        first = self.engine.filter_objects(query)
        self.assertEqual(first, [1, 3, 5])
        self.assertEqual(self.engine.filter_objects(query), first)

    def test_metrics(self):
        self.engine.filter_objects('john')
        self.engine.filter_objects('age > 1')
        self.engine.filter_objects('')
        self.assertEqual(self.engine.metrics['total_queries'], 3)
        self.assertEqual(self.engine.metrics['count_by_mode']['search'], 1)
        self.assertEqual(self.engine.metrics['count_by_mode']['structured'], 1)
        self.assertEqual(self.engine.metrics['count_by_mode']['empty'], 1)


if __name__ == '__main__':
    unittest.main()
