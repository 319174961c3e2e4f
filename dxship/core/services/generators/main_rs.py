"""
src/main.rs generator — the fixed demo UI.

The component is static content: a counter, a text-echo input and a
success panel. Interacting with it proves the WASM bundle loaded and
runs under the configured base path.
"""

from __future__ import annotations

from dxship.core.models.template import GeneratedFile

_MAIN_RS = """\
// Minimal Dioxus app to test deployment to shared hosting
use dioxus::prelude::*;

fn main() {
    launch(App);
}

#[component]
fn App() -> Element {
    let mut count = use_signal(|| 0);
    let mut message = use_signal(|| String::from(""));

    rsx! {
        div {
            style: "font-family: Arial, sans-serif; max-width: 800px; margin: 50px auto; padding: 20px;",

            h1 { "🎉 Dioxus Test App" }

            p {
                style: "font-size: 18px; color: #666;",
                "This is a minimal Dioxus app to test deployment to shared hosting."
            }

            div {
                style: "background: #f0f0f0; padding: 20px; border-radius: 8px; margin: 20px 0;",

                h2 { "Counter Test" }

                p {
                    style: "font-size: 24px; font-weight: bold; color: #2563eb;",
                    "Count: {count}"
                }

                div {
                    style: "display: flex; gap: 10px;",

                    button {
                        style: "padding: 10px 20px; font-size: 16px; background: #2563eb; color: white; border: none; border-radius: 4px; cursor: pointer;",
                        onclick: move |_| count += 1,
                        "Increment"
                    }

                    button {
                        style: "padding: 10px 20px; font-size: 16px; background: #dc2626; color: white; border: none; border-radius: 4px; cursor: pointer;",
                        onclick: move |_| count -= 1,
                        "Decrement"
                    }

                    button {
                        style: "padding: 10px 20px; font-size: 16px; background: #6b7280; color: white; border: none; border-radius: 4px; cursor: pointer;",
                        onclick: move |_| count.set(0),
                        "Reset"
                    }
                }
            }

            div {
                style: "background: #f0f0f0; padding: 20px; border-radius: 8px; margin: 20px 0;",

                h2 { "Input Test" }

                input {
                    style: "width: 100%; padding: 10px; font-size: 16px; border: 1px solid #ccc; border-radius: 4px; margin: 10px 0;",
                    r#type: "text",
                    placeholder: "Type something...",
                    oninput: move |evt| message.set(evt.value().clone()),
                }

                if !message().is_empty() {
                    p {
                        style: "font-size: 18px; color: #059669; margin-top: 10px;",
                        "You typed: \\"{message}\\""
                    }
                }
            }

            div {
                style: "background: #dcfce7; padding: 20px; border-radius: 8px; margin: 20px 0;",

                h2 { "✅ Success!" }

                p { "If you can see this page and interact with the controls above, then:" }

                ul {
                    style: "line-height: 1.8;",
                    li { "✓ Dioxus compiled to WASM successfully" }
                    li { "✓ WASM is loading in your browser" }
                    li { "✓ Your shared hosting setup works!" }
                }
            }

            footer {
                style: "margin-top: 40px; padding-top: 20px; border-top: 1px solid #ccc; color: #666; font-size: 14px;",
                p { "Deployed as static WASM - no server-side code running" }
                p {
                    "Built with "
                    a {
                        href: "https://dioxuslabs.com",
                        style: "color: #2563eb;",
                        "Dioxus"
                    }
                }
            }
        }
    }
}
"""


def generate_main_rs() -> GeneratedFile:
    return GeneratedFile(path="src/main.rs", content=_MAIN_RS, reason="App entry point")
