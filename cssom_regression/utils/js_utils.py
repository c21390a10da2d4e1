"""
cssom_regression/utils/js_utils.py

JavaScript injection utilities for pseudo-state detection.

All JavaScript evaluated in the page is generated through functions in this
module. Scripts return plain JSON values (evaluated with returnByValue).
"""

import json

# element identifier used by the detection pass: tag, #id, .classes, @index among element siblings
_ELEMENT_IDENTIFIER_JS = "\n".join([
    "  function elementIdentifier(element) {",
    "    const parts = [element.tagName.toLowerCase()];",
    "    if (element.id) parts.push('#' + element.id);",
    "    const className = typeof element.className === 'string' ? element.className : element.getAttribute('class') || '';",
    "    const classes = className.split(/\\s+/).filter((c) => c.length > 0);",
    "    if (classes.length > 0) parts.push('.' + classes.join('.'));",
    "    const siblings = element.parentElement ? Array.from(element.parentElement.children) : [element];",
    "    parts.push('@' + siblings.indexOf(element));",
    "    return parts.join('');",
    "  }",
])

_SCOPED_ELEMENTS_JS = "\n".join([
    "  function scopedElements(selector) {",
    "    const roots = Array.from(document.querySelectorAll(selector));",
    "    const all = [];",
    "    for (const root of roots) {",
    "      all.push(root);",
    "      for (const descendant of root.querySelectorAll('*')) all.push(descendant);",
    "    }",
    "    return { roots, all };",
    "  }",
])


def generate_collect_style_rules_js(scope_selector: str) -> str:
    """Generate JavaScript that collects scope-root identifiers and same-origin style rule selectors.

    Args:
        scope_selector: CSS selector of the scope roots.

    Returns:
        JavaScript expression evaluating to
        {"rootIdentifiers": [str, ...], "selectorTexts": [str, ...]}.
    """
    js_lines = [
        "(() => {",
        f"  const scopeSelector = {json.dumps(scope_selector)};",
        _ELEMENT_IDENTIFIER_JS,
        _SCOPED_ELEMENTS_JS,
        "  const { roots } = scopedElements(scopeSelector);",
        "  const selectorTexts = [];",
        "  for (const sheet of Array.from(document.styleSheets)) {",
        "    try {",
        "      // cross-origin sheets are not readable",
        "      if (sheet.href && !sheet.href.startsWith(window.location.origin)) continue;",
        "      const rules = sheet.cssRules;",
        "      if (!rules) continue;",
        "      for (const rule of Array.from(rules)) {",
        "        if (rule instanceof CSSStyleRule) selectorTexts.push(rule.selectorText);",
        "      }",
        "    } catch (e) {",
        "      continue;",
        "    }",
        "  }",
        "  return { rootIdentifiers: roots.map(elementIdentifier), selectorTexts };",
        "})()",
    ]
    return "\n".join(js_lines)


def generate_match_selectors_js(scope_selector: str, base_selectors: list[str]) -> str:
    """Generate JavaScript that matches base selectors against every scoped element.

    Args:
        scope_selector: CSS selector of the scope roots.
        base_selectors: Selectors to test with Element.matches.

    Returns:
        JavaScript expression evaluating to {baseSelector: [identifier, ...]}.
        Selectors the page cannot parse are left out of the result.
    """
    js_lines = [
        "(() => {",
        f"  const scopeSelector = {json.dumps(scope_selector)};",
        f"  const baseSelectors = {json.dumps(base_selectors)};",
        _ELEMENT_IDENTIFIER_JS,
        _SCOPED_ELEMENTS_JS,
        "  const { all } = scopedElements(scopeSelector);",
        "  const matches = {};",
        "  for (const base of baseSelectors) {",
        "    try {",
        "      matches[base] = all.filter((el) => el.matches(base)).map(elementIdentifier);",
        "    } catch (e) {",
        "      continue;",
        "    }",
        "  }",
        "  return matches;",
        "})()",
    ]
    return "\n".join(js_lines)
