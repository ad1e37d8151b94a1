import copy

from flowgraph.schema import EdgeDef, GraphDef
from flowgraph.validator import (
    CYCLE_ERROR,
    MULTIPLE_END_ERROR,
    MULTIPLE_START_ERROR,
    build_degree_index,
    validate_flow,
    validate_payload,
)


def test_empty_canvas_is_valid():
    report = validate_flow([], [])

    assert report.is_valid
    assert report.errors == []
    assert report.to_dict() == {"isValid": True, "errors": []}


def test_lone_start_node_is_isolated_and_missing_outgoing(make_node):
    report = validate_flow([make_node("start", "start")], [])

    assert not report.is_valid
    assert report.errors == [
        'Error: Node "start" is isolated and not connected to anything.',
        'Error: Node "start" has no outgoing connection.',
    ]


def test_linear_flow_is_valid(linear_flow):
    nodes, edges = linear_flow

    report = validate_flow(nodes, edges)

    assert report.to_dict() == {"isValid": True, "errors": []}


def test_self_loop_is_reported_first(make_node, make_edge, linear_flow):
    nodes, edges = linear_flow
    edges = edges + [make_edge("greet", "greet")]

    report = validate_flow(nodes, edges)

    assert report.errors[0] == 'Error: Node "greet" connects to itself.'
    assert report.errors[-1] == CYCLE_ERROR


def test_second_start_node_adds_single_error(make_node, make_edge, linear_flow):
    nodes, edges = linear_flow
    nodes = nodes + [make_node("start2", "start")]
    edges = edges + [make_edge("start2", "greet")]

    report = validate_flow(nodes, edges)

    assert report.errors == [MULTIPLE_START_ERROR]


def test_multiple_start_error_is_not_repeated_per_node(make_node, make_edge):
    nodes = [make_node("s1", "start"), make_node("s2", "start")]
    nodes += [make_node(f"m{i}", "message", message="hello") for i in range(10)]
    nodes.append(make_node("end", "end"))
    edges = [make_edge("s1", "m0"), make_edge("s2", "m0")]
    edges += [make_edge(f"m{i}", f"m{i + 1}") for i in range(9)]
    edges.append(make_edge("m9", "end"))

    report = validate_flow(nodes, edges)

    assert report.errors.count(MULTIPLE_START_ERROR) == 1
    assert report.errors == [MULTIPLE_START_ERROR]


def test_two_end_nodes_report_once(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("cond", "condition"),
        make_node("end1", "end"),
        make_node("end2", "end"),
    ]
    edges = [
        make_edge("start", "cond"),
        make_edge("cond", "end1", label="true"),
        make_edge("cond", "end2", label="false"),
    ]

    report = validate_flow(nodes, edges)

    assert report.errors == [MULTIPLE_END_ERROR]


def test_condition_missing_false_branch(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("cond", "condition", label="Is VIP?"),
        make_node("msg", "message", message="welcome back"),
        make_node("end", "end"),
    ]
    edges = [
        make_edge("start", "cond"),
        make_edge("cond", "msg", label="True"),
        make_edge("msg", "end"),
    ]

    report = validate_flow(nodes, edges)

    assert report.errors == ["Error: Condition node \"Is VIP?\" is missing an outgoing 'false' path."]


def test_condition_missing_true_branch_uses_data_label(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("cond", "condition"),
        make_node("end", "end"),
    ]
    edges = [
        make_edge("start", "cond"),
        EdgeDef(source="cond", target="end", data={"label": "FALSE"}),
    ]

    report = validate_flow(nodes, edges)

    assert report.errors == ["Error: Condition node \"cond\" is missing an outgoing 'true' path."]


def test_condition_without_branches_reports_both(make_node, make_edge):
    nodes = [make_node("start", "start"), make_node("cond", "condition"), make_node("end", "end")]
    edges = [make_edge("start", "cond"), make_edge("cond", "end")]

    errors = validate_flow(nodes, edges).errors

    assert "Error: Condition node \"cond\" is missing an outgoing 'true' path." in errors
    assert "Error: Condition node \"cond\" is missing an outgoing 'false' path." in errors


def test_two_node_cycle_is_detected(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("a", "message", message="ping"),
        make_node("b", "message", message="pong"),
        make_node("end", "end"),
    ]
    edges = [
        make_edge("start", "a"),
        make_edge("a", "b"),
        make_edge("b", "a"),
        make_edge("b", "end"),
    ]

    report = validate_flow(nodes, edges)

    assert report.errors == [CYCLE_ERROR]


def test_many_cycles_yield_one_cycle_error(make_node, make_edge):
    nodes = [make_node("start", "start")]
    nodes += [make_node(n, "message", message=n) for n in ("a", "b", "c", "d")]
    nodes.append(make_node("end", "end"))
    edges = [
        make_edge("start", "a"),
        make_edge("a", "b"),
        make_edge("b", "a"),
        make_edge("b", "c"),
        make_edge("c", "d"),
        make_edge("d", "c"),
        make_edge("d", "end"),
    ]

    assert validate_flow(nodes, edges).errors.count(CYCLE_ERROR) == 1


def test_buttons_each_unmatched_button_is_reported(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("btn", "buttons", message="Continue?", buttons=["Yes", "No"]),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "btn"), make_edge("btn", "end", label="yes")]

    report = validate_flow(nodes, edges)

    assert report.errors == [
        'Error: Buttons node "btn" is missing an outgoing connection for the "No" button.'
    ]


def test_buttons_with_outgoing_edges_but_no_buttons(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("btn", "buttons", message="Pick one", buttons=[]),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "btn"), make_edge("btn", "end", label="anything")]

    report = validate_flow(nodes, edges)

    assert report.errors == [
        'Error: Node "btn" is missing required content: buttons',
        'Error: Buttons node "btn" has outgoing connections but no buttons defined.',
    ]


def test_end_node_with_outgoing_connection(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("end", "end"),
        make_node("after", "message", message="too late"),
    ]
    edges = [make_edge("start", "end"), make_edge("end", "after")]

    report = validate_flow(nodes, edges)

    assert 'Error: End node "end" cannot have outgoing connections.' in report.errors
    assert 'Error: Node "after" has no outgoing connection.' in report.errors


def test_start_node_with_incoming_connection(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("a", "message", message="hi"),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "a"), make_edge("a", "start"), make_edge("a", "end")]

    errors = validate_flow(nodes, edges).errors

    assert 'Error: Start Node "start" cannot have incoming connections.' in errors
    assert errors[-1] == CYCLE_ERROR


def test_required_content_and_invalid_url(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("api", "apiCall", label="Fetch", requestName="  ", url="not a url"),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "api"), make_edge("api", "end")]

    report = validate_flow(nodes, edges)

    assert report.errors == [
        'Error: Node "Fetch" is missing required content: requestName',
        'Error: Node "Fetch" has an invalid API URL.',
    ]


def test_blank_url_is_missing_not_invalid(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("api", "apiCall", requestName="lookup", url=""),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "api"), make_edge("api", "end")]

    assert validate_flow(nodes, edges).errors == [
        'Error: Node "api" is missing required content: url'
    ]


def test_keyword_list_of_blanks_is_missing(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("kw", "keywordMatch", keywords=["", "   "]),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "kw"), make_edge("kw", "end")]

    assert validate_flow(nodes, edges).errors == [
        'Error: Node "kw" is missing required content: keywords'
    ]


def test_ask_question_requires_both_fields(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("ask", "askaQuestion", question="Your name?"),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "ask"), make_edge("ask", "end")]

    assert validate_flow(nodes, edges).errors == [
        'Error: Node "ask" is missing required content: propertyName'
    ]


def test_condition_has_no_required_fields(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("cond", "condition"),
        make_node("yes", "message", message="yes"),
        make_node("end", "end"),
    ]
    edges = [
        make_edge("start", "cond"),
        make_edge("cond", "yes", label="true"),
        make_edge("cond", "end", label="false"),
        make_edge("yes", "end"),
    ]

    assert validate_flow(nodes, edges).is_valid


def test_dangling_edges_are_inert(make_edge, linear_flow):
    nodes, edges = linear_flow
    edges = edges + [make_edge("greet", "ghost"), make_edge("ghost", "greet")]

    report = validate_flow(nodes, edges)
    degrees = build_degree_index(GraphDef(nodes=tuple(nodes), edges=tuple(edges)))

    assert report.is_valid
    assert degrees["greet"].incoming == 2
    assert degrees["greet"].outgoing == 2
    assert "ghost" not in degrees


def test_error_order_follows_phases(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("loop", "message", message="again"),
        make_node("lonely", "message", message="nobody calls"),
        make_node("end1", "end"),
        make_node("end2", "end"),
    ]
    edges = [make_edge("start", "loop"), make_edge("loop", "loop"), make_edge("loop", "end1")]

    errors = validate_flow(nodes, edges).errors

    assert errors[0] == 'Error: Node "loop" connects to itself.'
    assert errors[-2] == MULTIPLE_END_ERROR
    assert errors[-1] == CYCLE_ERROR
    assert errors.index('Error: Node "lonely" is isolated and not connected to anything.') < errors.index(
        'Error: Node "end2" is isolated and not connected to anything.'
    )


def test_validation_is_idempotent_and_side_effect_free(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("btn", "buttons", message="Pick", buttons=["A", "B"]),
        make_node("end", "end"),
        make_node("end2", "end"),
    ]
    edges = [make_edge("start", "btn"), make_edge("btn", "end", label="a"), make_edge("btn", "btn")]
    snapshot = (copy.deepcopy(nodes), copy.deepcopy(edges))

    first = validate_flow(nodes, edges)
    second = validate_flow(nodes, edges)

    assert first == second
    assert (nodes, edges) == snapshot


def test_deep_linear_flow_validates(make_node, make_edge):
    count = 5000
    nodes = [make_node("start", "start")]
    nodes += [make_node(f"m{i}", "message", message="step") for i in range(count)]
    nodes.append(make_node("end", "end"))
    edges = [make_edge("start", "m0")]
    edges += [make_edge(f"m{i}", f"m{i + 1}") for i in range(count - 1)]
    edges.append(make_edge(f"m{count - 1}", "end"))

    assert validate_flow(nodes, edges).is_valid


def test_validate_payload_accepts_export(sample_payload):
    report = validate_payload(sample_payload)

    assert report.to_dict() == {"isValid": True, "errors": []}


def test_buttons_with_only_blank_labels_count_as_no_buttons(make_node, make_edge):
    nodes = [
        make_node("start", "start"),
        make_node("btn", "buttons", message="Pick one", buttons=["", "  "]),
        make_node("end", "end"),
    ]
    edges = [make_edge("start", "btn"), make_edge("btn", "end", label="anything")]

    report = validate_flow(nodes, edges)

    assert report.errors == [
        'Error: Node "btn" is missing required content: buttons',
        'Error: Buttons node "btn" has outgoing connections but no buttons defined.',
    ]
