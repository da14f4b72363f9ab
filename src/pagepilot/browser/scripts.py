# In-page JavaScript used by the inspector, marker and cursor
# Changes: Initial creation
#
# Each constant is a function expression passed to Page.evaluate(). They take
# at most one argument (Playwright serializes it) and return plain JSON.
"""JavaScript sources evaluated inside the page."""

# Tags that never count as visible page content on their own
_EXCLUDED_TAGS = """
  "html", "body", "head",
  "script", "style", "meta", "link", "title", "noscript",
  "template", "slot", "iframe",
  "defs", "clippath", "lineargradient", "radialgradient", "mask", "pattern", "stop",
  "shadow", "shadowroot",
  "time", "data", "param", "source", "track",
  "main", "section", "article", "nav",
  "base", "command", "datalist", "optgroup",
  "div"
"""

# Text-level tags are dropped from the marker scan on top of the list above
_MARKER_EXTRA_EXCLUDED_TAGS = """
  "p", "span", "h1", "h2", "h3", "h4", "h5", "h6",
  "label", "strong", "em", "b", "i", "u", "small",
  "blockquote", "q", "cite", "dfn", "abbr", "mark",
  "del", "ins", "sub", "sup", "code", "pre", "br",
  "hr", "wbr", "bdi", "bdo", "ruby", "rt", "rp",
  "figcaption", "figure", "picture", "summary"
"""

MARKER_CLASS = "pagepilot-element-marker"
LABEL_CONTAINER_ID = "pagepilot-label-container"
CURSOR_ID = "pagepilot-cursor"


ENUMERATE_ELEMENTS_SCRIPT = """
(maxTextLength) => {
  const excluded = new Set([%(excluded)s]);
  const results = [];

  for (const el of Array.from(document.querySelectorAll("*"))) {
    const tagName = el.tagName.toLowerCase();
    if (excluded.has(tagName)) continue;
    if (tagName === "input" && el.type === "hidden") continue;

    const rect = el.getBoundingClientRect();
    if (rect.width === 0 || rect.height === 0) continue;
    if (
      rect.bottom < 0 ||
      rect.right < 0 ||
      rect.top > window.innerHeight ||
      rect.left > window.innerWidth
    ) continue;

    const style = window.getComputedStyle(el);
    if (
      style.display === "none" ||
      style.visibility === "hidden" ||
      parseFloat(style.opacity) === 0
    ) continue;

    const x = Math.round(rect.left + rect.width / 2);
    const y = Math.round(rect.top + rect.height / 2);
    const topElement = document.elementFromPoint(x, y);
    if (!topElement || (topElement !== el && !el.contains(topElement))) continue;

    const className = typeof el.className === "string"
      ? el.className.trim()
      : (el.getAttribute("class") || "").trim();
    let text = (el.textContent || "").trim();
    if (!el.id && !className && !text) continue;

    if (maxTextLength && text.length > maxTextLength) {
      text = text.substring(0, maxTextLength) + "...";
    }

    const entry = { tagName, coordinates: { x, y } };
    if (el.id) entry.id = el.id;
    if (className) entry.className = className;
    if (text) entry.text = text;
    results.push(entry);
  }

  return results;
}
""" % {"excluded": _EXCLUDED_TAGS}


CLICKABLE_AND_INPUT_SCRIPT = """
() => {
  const clickableSelectors =
    'a, button, [role], [onclick], input[type="submit"], input[type="button"]';
  const inputSelectors =
    'input:not([type="submit"]):not([type="button"]):not([type="hidden"]), ' +
    'textarea, [contenteditable="true"], select';

  const isExposed = (el, x, y) => {
    const topElement = document.elementFromPoint(x, y);
    return !(topElement !== el && !el.contains(topElement));
  };

  const isRendered = (el) => {
    const checked = typeof el.checkVisibility === "function"
      ? el.checkVisibility({
          checkOpacity: true,
          checkVisibilityCSS: true,
          contentVisibilityAuto: true,
          opacityProperty: true,
          visibilityProperty: true,
        })
      : true;
    const style = window.getComputedStyle(el);
    const notHiddenByCSS =
      style.display !== "none" &&
      style.visibility !== "hidden" &&
      parseFloat(style.opacity) > 0;
    return checked && notHiddenByCSS && !el.hidden;
  };

  const describe = (el) => {
    if (!isRendered(el)) return null;
    const rect = el.getBoundingClientRect();
    const x = Math.round(rect.left + rect.width / 2);
    const y = Math.round(rect.top + rect.height / 2);
    const attributes = {};
    for (const attr of Array.from(el.attributes)) {
      attributes[attr.name] = attr.value;
    }
    return {
      type: el.type || el.tagName.toLowerCase(),
      tagName: el.tagName.toLowerCase(),
      text: (el.textContent || "").trim(),
      placeholder: el.placeholder || "",
      coordinates: { x, y },
      boundingBox: { x: rect.left, y: rect.top, width: rect.width, height: rect.height },
      attributes,
      isVisibleInCurrentViewPort:
        rect.top >= 0 &&
        rect.left >= 0 &&
        rect.bottom <= window.innerHeight &&
        rect.right <= window.innerWidth,
      isVisuallyVisible: isExposed(el, x, y),
    };
  };

  const collect = (selector) =>
    Array.from(document.querySelectorAll(selector)).map(describe).filter(Boolean);

  return {
    clickableElements: collect(clickableSelectors),
    inputElements: collect(inputSelectors),
  };
}
"""


ELEMENT_AT_POINT_SCRIPT = """
([x, y]) => {
  const interactiveRoles = new Set([
    "button", "link", "checkbox", "radio", "tab", "menuitem", "option",
    "switch", "combobox", "textbox", "searchbox", "slider", "spinbutton", "treeitem"
  ]);
  const handlerAttributes = ["onclick", "onmousedown", "onmouseup", "onkeydown", "onkeyup"];

  const looksInteractive = (el) => {
    const tag = el.tagName.toLowerCase();
    switch (tag) {
      case "a":
        return el.hasAttribute("href");
      case "input":
        return (el.getAttribute("type") || "").toLowerCase() !== "hidden";
      case "button":
      case "select":
      case "textarea":
      case "summary":
      case "details":
      case "label":
      case "option":
        return true;
    }
    const role = (el.getAttribute("role") || "").toLowerCase();
    if (interactiveRoles.has(role)) return true;
    if (el.getAttribute("contenteditable") === "true") return true;

    const hasHandler = handlerAttributes.some((name) => el.hasAttribute(name));
    const hasLabel = el.hasAttribute("aria-label") || el.hasAttribute("aria-labelledby");
    const rawTabIndex = el.getAttribute("tabindex");
    const tabIndex = rawTabIndex === null ? -1 : parseInt(rawTabIndex, 10);
    return (hasHandler || hasLabel) && tabIndex >= 0;
  };

  let node = document.elementFromPoint(x, y);
  let found = null;
  while (node && node !== document.body && node !== document.documentElement) {
    if (looksInteractive(node)) {
      found = node;
      break;
    }
    node = node.parentElement;
  }
  if (!found) return null;

  const attributes = {};
  for (const attr of Array.from(found.attributes)) {
    attributes[attr.name] = attr.value;
  }
  const className = typeof found.className === "string"
    ? found.className
    : (found.getAttribute("class") || "");
  return {
    tagName: found.tagName.toLowerCase(),
    id: found.id || "",
    className,
    textContent: (found.textContent || "").trim().substring(0, 200),
    attributes,
    href: found.getAttribute("href") || "",
    type: found.getAttribute("type") || "",
    value: typeof found.value === "string" ? found.value : "",
    placeholder: found.getAttribute("placeholder") || "",
    role: found.getAttribute("role") || "",
  };
}
"""


CHECK_VISIBILITY_SCRIPT = """
([x, y]) => {
  const element = document.elementFromPoint(x, y);
  if (!element) return null;
  const { top } = element.getBoundingClientRect();
  const needsScrolling = top > window.innerHeight || top < 0;
  if (needsScrolling) {
    element.scrollIntoView({ behavior: "smooth" });
  }
  return { top, needsScrolling };
}
"""


MARKER_SCAN_SCRIPT = """
({ maxElements, minTextLength }) => {
  const excluded = new Set([%(excluded)s, %(extra)s]);
  const includeSelectors = [
    'a', 'button', 'input:not([type="hidden"])', 'select', 'textarea',
    '[role="button"]', '[role="link"]', '[role="checkbox"]', '[role="radio"]',
    '[role="tab"]', '[role="menuitem"]', '[role="combobox"]', '[role="option"]',
    '[role="switch"]', '[role="searchbox"]', '[role="textbox"]',
    '[onclick]', '[onkeydown]', '[onkeyup]', '[onmousedown]', '[onmouseup]',
    '[tabindex]:not([tabindex="-1"])'
  ];

  const seen = new Set();
  const candidates = [];
  for (const selector of includeSelectors) {
    for (const el of Array.from(document.querySelectorAll(selector))) {
      if (seen.has(el)) continue;
      seen.add(el);
      candidates.push(el);
    }
  }

  const found = [];
  for (const el of candidates) {
    if (found.length >= maxElements) break;

    const tagName = el.tagName.toLowerCase();
    if (excluded.has(tagName)) continue;
    if (tagName === "input" && el.type === "hidden") continue;

    const rect = el.getBoundingClientRect();
    if (rect.width === 0 || rect.height === 0) continue;
    if (
      rect.bottom < 0 ||
      rect.right < 0 ||
      rect.top > window.innerHeight ||
      rect.left > window.innerWidth
    ) continue;
    if (rect.width < 5 || rect.height < 5) continue;

    const style = window.getComputedStyle(el);
    if (
      style.display === "none" ||
      style.visibility === "hidden" ||
      parseFloat(style.opacity) === 0
    ) continue;

    if (minTextLength > 0 && (el.textContent || "").trim().length < minTextLength) continue;

    const x = Math.round(rect.left + rect.width / 2);
    const y = Math.round(rect.top + rect.height / 2);
    const topElement = document.elementFromPoint(x, y);
    if (!topElement || (topElement !== el && !el.contains(topElement))) continue;

    found.push({
      coordinates: { x, y },
      rect: { left: rect.left, top: rect.top, right: rect.right, width: rect.width, height: rect.height },
    });
  }
  return found;
}
""" % {"excluded": _EXCLUDED_TAGS, "extra": _MARKER_EXTRA_EXCLUDED_TAGS}


DRAW_MARKERS_SCRIPT = """
(markers) => {
  const root = document.body || document.documentElement;
  let container = document.getElementById("%(container)s");
  if (!container) {
    container = document.createElement("div");
    container.id = "%(container)s";
    Object.assign(container.style, {
      position: "fixed",
      top: "0",
      left: "0",
      width: "100vw",
      height: "100vh",
      pointerEvents: "none",
      zIndex: "2147483647",
    });
    root.appendChild(container);
  }

  for (const m of markers) {
    const box = document.createElement("div");
    box.className = "%(marker)s";
    Object.assign(box.style, {
      position: "fixed",
      left: m.rect.left + "px",
      top: m.rect.top + "px",
      width: m.rect.width + "px",
      height: m.rect.height + "px",
      border: "3px solid " + m.color,
      pointerEvents: "none",
      zIndex: "9000000",
      boxSizing: "border-box",
      background: "transparent",
    });
    root.appendChild(box);

    const label = document.createElement("div");
    label.textContent = String(m.label);
    Object.assign(label.style, {
      position: "fixed",
      left: (m.rect.right - 10) + "px",
      top: (m.rect.top - 10) + "px",
      backgroundColor: m.color,
      color: m.textColor,
      borderRadius: "50%%",
      width: "20px",
      height: "20px",
      display: "flex",
      alignItems: "center",
      justifyContent: "center",
      fontSize: "12px",
      fontWeight: "bold",
      boxShadow: "0 0 3px rgba(0,0,0,0.5)",
      outline: "1px solid white",
      zIndex: "2147483647",
    });
    container.appendChild(label);
  }
  return document.querySelectorAll(".%(marker)s").length;
}
""" % {"container": LABEL_CONTAINER_ID, "marker": MARKER_CLASS}


REMOVE_MARKERS_SCRIPT = """
() => {
  document.querySelectorAll(".%(marker)s").forEach((marker) => marker.remove());
  const container = document.getElementById("%(container)s");
  if (container) container.remove();
}
""" % {"container": LABEL_CONTAINER_ID, "marker": MARKER_CLASS}


MOVE_CURSOR_SCRIPT = """
([x, y]) => {
  let cursor = document.getElementById("%(cursor)s");
  if (!cursor) {
    cursor = document.createElement("div");
    cursor.id = "%(cursor)s";
    Object.assign(cursor.style, {
      position: "fixed",
      left: x + "px",
      top: y + "px",
      width: "16px",
      height: "16px",
      marginLeft: "-8px",
      marginTop: "-8px",
      borderRadius: "50%%",
      background: "rgba(255, 64, 64, 0.85)",
      border: "2px solid white",
      boxShadow: "0 0 4px rgba(0,0,0,0.6)",
      pointerEvents: "none",
      zIndex: "2147483647",
      transform: "scale(1)",
    });
    (document.body || document.documentElement).appendChild(cursor);
  }
  cursor.style.transition = "left 0.15s ease-out, top 0.15s ease-out, transform 0.12s ease-in-out";
  cursor.style.left = x + "px";
  cursor.style.top = y + "px";
  cursor.dataset.x = String(x);
  cursor.dataset.y = String(y);

  cursor.style.transform = "scale(1.6)";
  setTimeout(() => { cursor.style.transform = "scale(1)"; }, 150);
  return { x, y };
}
""" % {"cursor": CURSOR_ID}


SHIFT_CURSOR_SCRIPT = """
({ dy, viewportFactor }) => {
  const cursor = document.getElementById("%(cursor)s");
  if (!cursor) return null;
  const delta = viewportFactor ? viewportFactor * window.innerHeight : dy;
  const x = parseFloat(cursor.dataset.x || "0");
  const y = parseFloat(cursor.dataset.y || "0") + delta;
  cursor.style.transition = "none";
  cursor.style.top = y + "px";
  cursor.dataset.y = String(y);
  return { x, y };
}
""" % {"cursor": CURSOR_ID}


SET_CURSOR_VISIBILITY_SCRIPT = """
(visible) => {
  const cursor = document.getElementById("%(cursor)s");
  if (!cursor) return false;
  cursor.style.display = visible ? "block" : "none";
  return true;
}
""" % {"cursor": CURSOR_ID}


SCROLL_BY_SCRIPT = "([dx, dy]) => window.scrollBy(dx, dy)"

SCROLL_CHUNK_SCRIPT = "(direction) => window.scrollBy(0, direction * window.innerHeight)"

SCROLL_STATE_SCRIPT = """
() => ({ position: window.scrollY, total: document.body ? document.body.scrollHeight : 0 })
"""

READY_STATE_COMPLETE = "() => document.readyState === 'complete'"
