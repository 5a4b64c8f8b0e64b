from cachifier.application.services.reference_rewriter import ReferenceRewriter


def test_rewrites_literal_references() -> None:
    rewriter = ReferenceRewriter({"Image1.jpg": "Image1,abc.jpg"})
    css = ".image1 {background-image:url('Image1.jpg');}"
    assert rewriter.rewrite(css) == ".image1 {background-image:url('Image1,abc.jpg');}"


def test_longest_key_wins_over_shorter_overlapping_key() -> None:
    rewriter = ReferenceRewriter({"a.png": "a,1.png", "img/a.png": "img/a,2.png"})
    text = "url(../img/a.png) url(a.png)"
    assert rewriter.rewrite(text) == "url(../img/a,2.png) url(a,1.png)"


def test_rewrite_is_idempotent() -> None:
    rewriter = ReferenceRewriter({"css/site.css": "css/site,x1.css", "img/logo.png": "img/logo,y2.png"})
    text = "@import 'css/site.css'; .logo { background: url(img/logo.png); }"
    once = rewriter.rewrite(text)
    assert rewriter.rewrite(once) == once


def test_backslash_keys_are_normalized() -> None:
    rewriter = ReferenceRewriter({"img\\logo.png": "img\\logo,y2.png"})
    assert rewriter.rewrite("url(img/logo.png)") == "url(img/logo,y2.png)"


def test_empty_mapping_leaves_text_untouched() -> None:
    rewriter = ReferenceRewriter({"same.css": "same.css"})
    assert len(rewriter) == 0
    assert rewriter.rewrite("body {}") == "body {}"
