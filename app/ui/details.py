"""
Word Details UI

Renders the full dictionary content of a word.
"""

from typing import Optional

import streamlit as st

from core.schemas import WordEntry


def render_word_details(entry: Optional[WordEntry], hint: Optional[str] = None):
    """
    Render word, phonetic, definition, tags, examples and mnemonic.

    Args:
        entry: Lexicon entry (None if the word is missing from the lexicon)
        hint: Mnemonic blueprint to show below the definition
    """
    if entry is None:
        st.info("⚠️ This word is not in the lexicon yet.")
        return

    heading = f"## {entry.word}"
    if entry.phonetic:
        heading += f"  \n`{entry.phonetic}`"
    st.markdown(heading)

    st.caption(f"**Part of Speech:** {entry.pos.value.title()}")
    if entry.definition:
        st.markdown(f"**{entry.definition}**")

    if entry.tags:
        st.caption(f"**Topics:** {', '.join(entry.tags)}")

    if entry.examples:
        with st.expander("📝 Examples"):
            for example in entry.examples:
                st.caption(example)

    blueprint = hint or entry.hint
    if blueprint:
        st.info(f"💡 {blueprint}")
