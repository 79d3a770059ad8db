from __future__ import annotations

from slimcode.models import ContentKind

SAMPLE_HTML = """<!DOCTYPE html>
<html>
  <head>
    <title> My   page </title>
    <!-- styles are inlined below -->
    <style>
      .a { color: red; }
    </style>
  </head>
  <body class="main  page">
    <p>Hello,
       <b>world</b>!</p>
    <pre>  keep
   this </pre>
    <img src=logo.png alt="a > b" />
  </body>
</html>
"""

SAMPLE_CSS = """/*! license: MIT */
@media screen and (max-width: 600px) {
  .nav  a :hover ,
  .nav > li {
    margin : 0 auto ;
    content: "} { /* not a comment */";
  }
}
/* trailing note */
"""

SAMPLE_JSON = """{
  "name": "slimcode",
  "version": 1.0,
  "tags": [ "css", "js" ],
  "nested": { "empty": {}, "list": [], "flag": true, "none": null },
  "big": 12345678901234567890.50
}
"""

SAMPLE_JS = """// header comment
import { render } from "./render.js";

const greeting = "//not a comment";
let pattern = /\\/\\/+/g; // slashes
const ratio = total / count / 2;

function add(a, b) {
  return a + +b;
}

const tpl = `sum: ${add(1, 2)} // kept`;
export default function main() {
  let i = 0
  i++
  return i
}
"""

SAMPLE_JSX = """const App = () => (
  <div className="app"   id={ "main" }>
    <Header title="Hi" />
    Hello,   world!
    {items.map((item) => <Item key={item.id} {...item} />)}
  </div>
);
"""

SAMPLES: dict[ContentKind, str] = {
    ContentKind.MARKUP: SAMPLE_HTML,
    ContentKind.STYLESHEET: SAMPLE_CSS,
    ContentKind.STRUCTURED_DATA: SAMPLE_JSON,
    ContentKind.SCRIPT: SAMPLE_JS,
    ContentKind.SCRIPT_WITH_MARKUP: SAMPLE_JSX,
}
