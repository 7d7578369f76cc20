PEG_NOTATION = r"""
    start: rule+

    rule: NAME "<-" choice ";"

    choice: sequence ("/" sequence)*
    sequence: term+

    ?term: suffixed
         | "&" suffixed               -> test
         | "!" suffixed               -> test_not

    ?suffixed: primary
             | primary "*"            -> zero_or_more
             | primary "+"            -> one_or_more
             | primary "?"            -> optional

    ?primary: STRING                  -> literal
            | CLASS                   -> any_of
            | "@" NAME                -> vocabulary
            | "{" NAME "}"            -> action
            | "<" choice ">"          -> capture
            | "."                     -> any_char
            | "$"                     -> end_of_input
            | NAME                    -> reference
            | "(" choice ")"

    NAME: /[a-z_][a-z0-9_]*/
    STRING: /"[^"\n]*"i?/
    CLASS: /\[(\\.|[^\]\\\n])*\]/

    %import common.WS
    %ignore WS
    %ignore /#[^\n]*/
"""

ORDER_GRAMMAR = r"""
    # whole line: one drink order or a cancellation word
    order        <- ws* (substantive / cancel) politeness? terminal_mark ;

    substantive  <- article? vessel separator description ;

    article      <- @articles ws+ ;
    vessel       <- <@vessels> {set_vessel} ;
    separator    <- ws* "," ws*
                  / ws+ "of"i ws+ ;
    description  <- <(!tail .)+> {set_description} ;

    tail         <- politeness? terminal_mark ;
    politeness   <- ws* ","? ws* @politeness ;
    terminal_mark <- ws* [.!?]? ws* $ ;

    # no suffix accepted after a cancellation word
    cancel       <- @cancellations $ {set_terminal} ;

    # lone vessel word, optionally with an article
    article_vessel <- ws* article? vessel ws* $ ;

    ws           <- [ \t] ;
"""
