import streamlit as st


def setup_page():
    st.set_page_config(
        page_title="S&P 500 tidy notebooks",
        page_icon="📓",
        layout="wide",
    )

    st.markdown(
        """
        <style>
        :root {
            --color-primary: #ff6b6b;
            --color-secondary: #3399ff;
            --padding: 1rem;
        }
        .notebook-prose {
            max-width: 52rem;
            line-height: 1.55;
        }
        div[data-testid="stCodeBlock"] {
            max-width: 52rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_header():
    header = st.container()
    with header:
        st.title("📓 S&P 500 tidy-data notebooks")
        st.caption(
            "Functional iteration, scoped verbs, reshaping, rolling correlation "
            "and a point-in-time constituents table."
        )
    st.divider()


def prose(text: str) -> None:
    """Render a block of narrative markdown in the notebook column width."""
    st.markdown(f'<div class="notebook-prose">\n\n{text}\n\n</div>', unsafe_allow_html=True)


def code_cell(source: str) -> None:
    st.code(source.strip("\n"), language="python")
